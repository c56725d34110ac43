"""Token cache entries for driving msal's SerializableTokenCache in tests."""

import msal

REFRESH_TOKEN = msal.TokenCache.CredentialType.REFRESH_TOKEN


def refresh_token_entry(home_account_id="abc.def", secret="rt-secret", client_id="client-1"):
    return {
        "credential_type": REFRESH_TOKEN,
        "home_account_id": home_account_id,
        "environment": "login.microsoftonline.com",
        "client_id": client_id,
        "target": "User.Read",
        "secret": secret,
    }


def add_refresh_token(token_cache, **kwargs):
    entry = refresh_token_entry(**kwargs)
    token_cache.modify(REFRESH_TOKEN, entry, entry)
    return entry


def refresh_token_secrets(token_cache):
    return sorted(entry["secret"] for entry in token_cache.search(REFRESH_TOKEN))
