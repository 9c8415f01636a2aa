import logging
import requests
from flask import current_app
from kindergarten.errors import UpstreamError

logger = logging.getLogger(__name__)

TWILIO_API_URL = 'https://api.twilio.com/2010-04-01'


class TwilioClient:

    def __init__(self, account_sid, auth_token, from_number=None, timeout=15):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            config['TWILIO_ACCOUNT_SID'],
            config['TWILIO_AUTH_TOKEN'],
            from_number=config.get('TWILIO_PHONE_NUMBER'),
            timeout=config.get('UPSTREAM_TIMEOUT', 15)
        )

    def _request(self, method, path, **kwargs):
        url = f'{TWILIO_API_URL}/Accounts/{self.account_sid}/{path}'
        try:
            response = requests.request(method, url, auth=(self.account_sid, self.auth_token),
                                        timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error(f"Twilio {method} {path} failed: {e}")
            raise UpstreamError('SMS provider request failed')

    def send_sms(self, to_number, body):
        result = self._request('POST', 'Messages.json', data={
            'To': to_number,
            'From': self.from_number,
            'Body': body
        })
        logger.info(f"SMS queued to {to_number} (sid={result.get('sid')})")
        return result.get('sid')

    def search_numbers(self, country_code, area_code=None, limit=10):
        params = {'PageSize': limit}
        if area_code:
            params['AreaCode'] = area_code
        result = self._request('GET', f'AvailablePhoneNumbers/{country_code}/Local.json', params=params)
        return [n['phone_number'] for n in result.get('available_phone_numbers', [])]

    def purchase_number(self, phone_number):
        result = self._request('POST', 'IncomingPhoneNumbers.json', data={'PhoneNumber': phone_number})
        logger.info(f"Purchased number {result.get('phone_number')}")
        return {'phone_number': result.get('phone_number', phone_number), 'sid': result.get('sid', '')}


def get_sms_client():
    return TwilioClient.from_config(current_app.config)
