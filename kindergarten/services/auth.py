"""Admin authentication and the SMS password-reset flow.

Reset is three steps: send a 6-digit code to the account's phone, verify it,
then reset the password with the same code. A new code for the same phone
replaces any pending one.
"""
import logging
import secrets
from kindergarten.errors import NotFoundError, UnauthorizedError, UpstreamError, ValidationError
from kindergarten.models import VerificationCode
from kindergarten.repositories import AccountRepository, VerificationCodeRepository
from kindergarten.utils.sms import get_sms_client

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid credentials'


def generate_code():
    return f'{secrets.randbelow(1000000):06d}'


class AuthService:

    def __init__(self, session, sms_client=None, code_ttl_minutes=10):
        self.session = session
        self.accounts = AccountRepository(session)
        self.codes = VerificationCodeRepository(session)
        self.code_ttl_minutes = code_ttl_minutes
        self._sms_client = sms_client

    @property
    def sms(self):
        if self._sms_client is None:
            self._sms_client = get_sms_client()
        return self._sms_client

    def authenticate(self, username, password):
        account = self.accounts.find_by_username(username)
        if account is None or account.role != 'admin' or not account.check_password(password):
            logger.info(f"Rejected login for {username}")
            raise UnauthorizedError(INVALID_CREDENTIALS)
        logger.info(f"Admin {username} authenticated")
        return account

    def send_verification_code(self, phone_number):
        if self.accounts.find_by_phone_number(phone_number) is None:
            raise NotFoundError('No account is registered with this phone number')

        code = generate_code()
        record = self.codes.get(phone_number) or VerificationCode(phone_number=phone_number)
        record.set_code(code, self.code_ttl_minutes)
        self.codes.save(record)

        try:
            self.sms.send_sms(phone_number, f'Your verification code is {code}. It expires in {self.code_ttl_minutes} minutes.')
        except UpstreamError:
            self.codes.remove(record)
            raise
        logger.info(f"Verification code sent to {phone_number}")
        return record

    def verify_code(self, phone_number, code):
        record = self._check_code(phone_number, code)
        record.verified = True
        self.codes.commit('saving')
        return True

    def reset_password(self, phone_number, code, new_password):
        record = self._check_code(phone_number, code)
        account = self.accounts.find_by_phone_number(phone_number)
        if account is None:
            raise NotFoundError('No account is registered with this phone number')
        account.set_password(new_password)
        self.session.delete(record)
        self.accounts.commit('resetting password for')
        logger.info(f"Password reset for account {account.username}")
        return account

    def purge_expired_codes(self):
        count = self.codes.purge_expired()
        if count:
            logger.info(f"Purged {count} expired verification codes")
        return count

    def _check_code(self, phone_number, code):
        record = self.codes.get(phone_number)
        if record is None:
            raise ValidationError('No verification code found for this phone number')
        if record.is_expired():
            self.codes.remove(record)
            raise ValidationError('Verification code has expired')
        if not record.check_code(code):
            raise ValidationError('Invalid verification code')
        return record
