from kindergarten.models import TwilioNumber
from kindergarten.repositories.base import BaseRepository


class TwilioNumberRepository(BaseRepository):
    model = TwilioNumber
    entity_name = 'phone number'

    def find_all(self):
        return self._run('fetching', lambda: self.query().order_by(TwilioNumber.date_created.desc()).all())
