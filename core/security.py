import hashlib
import hmac
import os

from passlib.hash import pbkdf2_sha256
from passlib.utils import consteq

# --- Configuration ---
# Keys the salt derivation. Override with an environment variable in any real deployment.
SECRET_KEY = os.getenv("DB_PASSWORD_SALT_KEY", "db-password-salt-key-CHANGE-ME")
HASH_ROUNDS = 29000
SALT_SIZE = 16  # bytes


class PasswordHasher:
    """
    Salt generation and one-way hashing for stored database passwords.

    The salt is derived from the password length, keyed by `secret_key`, so hashing
    the same candidate twice yields the same digest. That is what allows a stored
    digest to be checked by recomputing it.
    """

    def __init__(self, secret_key: str = SECRET_KEY, rounds: int = HASH_ROUNDS):
        self.secret_key = secret_key
        self.rounds = rounds

    def generate_salt(self, length: int) -> str:
        """Derives a hex salt from a password length."""
        mac = hmac.new(self.secret_key.encode("utf-8"), str(length).encode("utf-8"), hashlib.sha256)
        return mac.hexdigest()[:SALT_SIZE * 2]

    def hash_password(self, candidate: str, salt: str) -> str:
        """Hashes `candidate` with pbkdf2-sha256 using exactly the given salt."""
        handler = pbkdf2_sha256.using(salt=bytes.fromhex(salt), rounds=self.rounds)
        return handler.hash(candidate)

    def digests_match(self, left: str, right: str) -> bool:
        """Constant-time comparison of two digests."""
        if left is None or right is None:
            return False
        return consteq(left.encode("utf-8"), right.encode("utf-8"))


default_hasher = PasswordHasher()


# --- Functions ---

def generate_salt(length: int) -> str:
    """Derives a salt from a password length with the default hasher."""
    return default_hasher.generate_salt(length)

def get_password_hash(password: str) -> str:
    """Hashes a plain password with the default hasher."""
    return default_hasher.hash_password(password, default_hasher.generate_salt(len(password)))


if __name__ == '__main__':
    print("--- Security Module Examples ---")

    plain_pw = "LongEnough1!"
    salt = generate_salt(len(plain_pw))
    hashed_pw = get_password_hash(plain_pw)
    print(f"Salt for length {len(plain_pw)}: {salt}")
    print(f"Hashed Password: {hashed_pw}")
    print(f"Rehash matches: {default_hasher.digests_match(get_password_hash(plain_pw), hashed_pw)}")
    print(f"Wrong password matches: {default_hasher.digests_match(get_password_hash('LongEnough2!'), hashed_pw)}")

    print("\n--- End of Security Module Examples ---")
