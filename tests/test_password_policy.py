import unittest

from core.config import DatabaseConfig
from core.exceptions import InvalidPasswordError, PasswordRule
from core.password_policy import CharacterCounts, PasswordPolicy, count_characters
from core.security import PasswordHasher
from schemas.settings_schemas import DatabaseSettings

TEST_HASHER = PasswordHasher(secret_key="test-salt-key", rounds=1000)


class TestCountCharacters(unittest.TestCase):

    def test_counts_each_class(self):
        self.assertEqual(count_characters("AbC12!?x"), CharacterCounts(uppercase=2, lowercase=2, digits=2, symbols=2))

    def test_whitespace_is_a_symbol(self):
        self.assertEqual(count_characters("a b").symbols, 1)

    def test_caseless_letters_are_not_counted(self):
        self.assertEqual(count_characters("密码"), CharacterCounts())

    def test_empty(self):
        self.assertEqual(count_characters(""), CharacterCounts())


class TestInsecurePasswords(unittest.TestCase):

    def setUp(self):
        self.config = DatabaseConfig(hasher=TEST_HASHER)

    def test_password_stored_verbatim(self):
        self.config.set_database_password("anything")
        self.assertEqual(self.config.database_password, "anything")
        self.assertTrue(self.config.password_matches("anything"))

    def test_password_match_is_case_sensitive(self):
        self.config.set_database_password("anything")
        self.assertFalse(self.config.password_matches("Anything"))

    def test_empty_password_accepted(self):
        self.config.set_database_password("")
        self.assertEqual(self.config.database_password, "")
        self.assertTrue(self.config.password_matches(""))

    def test_weak_password_accepted(self):
        self.config.set_database_password("a")
        self.assertTrue(self.config.password_matches("a"))

    def test_missing_password_rejected(self):
        with self.assertRaises(InvalidPasswordError) as ctx:
            self.config.set_database_password(None)
        self.assertEqual(ctx.exception.rule, PasswordRule.MISSING)
        self.assertEqual(self.config.database_password, "app")

    def test_missing_candidate_in_match_rejected(self):
        with self.assertRaises(InvalidPasswordError) as ctx:
            self.config.password_matches(None)
        self.assertEqual(ctx.exception.rule, PasswordRule.MISSING)


class TestSecurePasswords(unittest.TestCase):

    def setUp(self):
        self.config = DatabaseConfig(hasher=TEST_HASHER)
        self.config.turn_on_secure_passwords()

    def assertRejected(self, candidate, rule):
        with self.assertRaises(InvalidPasswordError) as ctx:
            self.config.set_database_password(candidate)
        self.assertEqual(ctx.exception.rule, rule)

    def test_too_short(self):
        self.assertRejected("Short1!", PasswordRule.LENGTH)

    def test_missing_password(self):
        self.assertRejected(None, PasswordRule.MISSING)

    def test_no_symbol(self):
        self.assertRejected("LongEnough12", PasswordRule.SYMBOL)

    def test_no_digit(self):
        self.assertRejected("LongEnough!!", PasswordRule.DIGIT)

    def test_no_lowercase(self):
        self.assertRejected("LONGENOUGH1!", PasswordRule.LOWERCASE)

    def test_no_uppercase(self):
        self.assertRejected("longenough1!", PasswordRule.UPPERCASE)

    def test_first_violated_rule_is_reported(self):
        # Missing a symbol, a digit and an uppercase letter; symbol is checked first.
        self.assertRejected("longenoughpassword", PasswordRule.SYMBOL)
        # Too short as well as lacking everything else.
        self.assertRejected("abc", PasswordRule.LENGTH)

    def test_configured_thresholds_apply(self):
        self.config.min_password_length = 12
        self.assertRejected("LongEnough1!"[:11], PasswordRule.LENGTH)
        self.config.min_password_length = 8
        self.config.min_symbol_count = 2
        self.assertRejected("LongEnough1!", PasswordRule.SYMBOL)
        self.config.min_digit_count = 2
        self.assertRejected("LongEnough1!!", PasswordRule.DIGIT)
        self.config.min_uppercase_count = 3
        self.assertRejected("LongEnough12!!", PasswordRule.UPPERCASE)
        self.config.set_database_password("LONGEnough12!!")

    def test_rejected_password_leaves_stored_value(self):
        self.config.set_database_password("LongEnough1!")
        stored = self.config.database_password
        self.assertRejected("longenough1!", PasswordRule.UPPERCASE)
        self.assertEqual(self.config.database_password, stored)

    def test_valid_password_stored_as_digest(self):
        self.config.set_database_password("LongEnough1!")
        self.assertNotEqual(self.config.database_password, "LongEnough1!")
        self.assertTrue(self.config.database_password.startswith("$pbkdf2-sha256$"))

    def test_secure_match(self):
        self.config.set_database_password("LongEnough1!")
        self.assertTrue(self.config.secure_password_matches("LongEnough1!"))
        self.assertFalse(self.config.secure_password_matches("LongEnough1!x"))
        self.assertFalse(self.config.secure_password_matches("longEnough1!"))

    def test_secure_match_same_length_different_password(self):
        self.config.set_database_password("LongEnough1!")
        self.assertFalse(self.config.secure_password_matches("LongEnough2!"))

    def test_secure_match_rejects_blank_without_raising(self):
        self.assertFalse(self.config.secure_password_matches(""))
        self.assertFalse(self.config.secure_password_matches(None))
        self.assertFalse(self.config.secure_password_matches("   "))

    def test_secure_match_against_clear_text(self):
        # Secure passwords turned on after a clear-text password was stored.
        config = DatabaseConfig(hasher=TEST_HASHER)
        config.set_database_password("LongEnough1!")
        config.turn_on_secure_passwords()
        self.assertFalse(config.secure_password_matches("LongEnough1!"))


class TestPasswordPolicy(unittest.TestCase):

    def setUp(self):
        self.settings = DatabaseSettings()
        self.policy = PasswordPolicy(self.settings, TEST_HASHER)

    def test_validate_does_not_store(self):
        self.policy.validate("LongEnough1!")
        self.assertEqual(self.settings.database_password, "app")

    def test_validate_raises_first_rule(self):
        with self.assertRaises(InvalidPasswordError) as ctx:
            self.policy.validate("longenough1!")
        self.assertEqual(ctx.exception.rule, PasswordRule.UPPERCASE)

    def test_digest_is_repeatable(self):
        self.assertEqual(self.policy.digest("LongEnough1!"), self.policy.digest("LongEnough1!"))

    def test_digest_depends_on_secret_key(self):
        other = PasswordPolicy(self.settings, PasswordHasher(secret_key="other-key", rounds=1000))
        self.assertNotEqual(self.policy.digest("LongEnough1!"), other.digest("LongEnough1!"))

    def test_enabled_follows_settings(self):
        self.assertFalse(self.policy.enabled)
        self.settings.secure_passwords = True
        self.assertTrue(self.policy.enabled)


if __name__ == '__main__':
    unittest.main()
