from kindergarten.models import Account, VerificationCode
from kindergarten.repositories.base import BaseRepository
from kindergarten.utils.helpers import utc_now


class AccountRepository(BaseRepository):
    model = Account
    entity_name = 'account'

    def find_all(self):
        return self._run('fetching', lambda: self.query().order_by(Account.username).all())

    def find_by_username(self, username):
        return self._run('fetching', lambda: self.query().filter_by(username=username).first())

    def find_by_phone_number(self, phone_number):
        return self._run('fetching', lambda: self.query().filter_by(phone_number=phone_number).first())

    def create(self, data):
        data = dict(data)
        password = data.pop('password')
        account = Account(**data)
        account.set_password(password)
        self.session.add(account)
        self.commit('creating')
        return account

    def update(self, id, data):
        data = dict(data)
        password = data.pop('password', None)
        account = self.find_by_id(id)
        for key, value in data.items():
            setattr(account, key, value)
        if password:
            account.set_password(password)
        self.commit('updating')
        return account


class VerificationCodeRepository(BaseRepository):
    model = VerificationCode
    entity_name = 'verification code'

    def save(self, record):
        self.session.add(record)
        self.commit('saving')
        return record

    def remove(self, record):
        self.session.delete(record)
        self.commit('deleting')

    def purge_expired(self):
        count = self._run('purging', lambda: self.query().filter(
            VerificationCode.expires_at <= utc_now()).delete(synchronize_session=False))
        self.commit('purging')
        return count
