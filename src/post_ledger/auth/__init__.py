from post_ledger.auth.keys import (
    Keypair,
    new_identity,
    post_message,
    sign_post,
    verify_signature,
)

__all__ = ["Keypair", "new_identity", "post_message", "sign_post", "verify_signature"]
