import hashlib
import logging
import time
import requests
from flask import current_app
from kindergarten.errors import UpstreamError

logger = logging.getLogger(__name__)

CLOUDINARY_API_URL = 'https://api.cloudinary.com/v1_1'
CLOUDINARY_DELIVERY_URL = 'https://res.cloudinary.com'


class MediaHost:
    """Thin client for the Cloudinary upload API (signed requests)."""

    def __init__(self, cloud_name, api_key, api_secret, timeout=15):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            config['CLOUDINARY_CLOUD_NAME'],
            config['CLOUDINARY_API_KEY'],
            config['CLOUDINARY_API_SECRET'],
            timeout=config.get('UPSTREAM_TIMEOUT', 15)
        )

    def sign(self, params):
        to_sign = '&'.join(f'{key}={params[key]}' for key in sorted(params) if params[key] not in (None, ''))
        return hashlib.sha1((to_sign + self.api_secret).encode('utf-8')).hexdigest()

    def _signed(self, params):
        params = dict(params, timestamp=int(time.time()))
        params['signature'] = self.sign(params)
        params['api_key'] = self.api_key
        return params

    def _post(self, path, data, files=None):
        url = f'{CLOUDINARY_API_URL}/{self.cloud_name}/{path}'
        try:
            response = requests.post(url, data=data, files=files, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error(f"Media host request to {path} failed: {e}")
            raise UpstreamError('Media host request failed')

    def upload(self, file, folder, resource_type='auto'):
        """Upload a data URI string or a werkzeug FileStorage; returns ``{url, public_id}``."""
        data = self._signed({'folder': folder})
        if isinstance(file, str):
            data['file'] = file
            result = self._post(f'{resource_type}/upload', data)
        else:
            result = self._post(f'{resource_type}/upload', data,
                                files={'file': (file.filename, file.stream, file.mimetype)})
        logger.info(f"Uploaded media {result.get('public_id')} to {folder}")
        return {'url': result.get('secure_url', ''), 'public_id': result.get('public_id', '')}

    def destroy(self, public_id, resource_type='image'):
        result = self._post(f'{resource_type}/destroy', self._signed({'public_id': public_id}))
        logger.info(f"Destroyed media {public_id}: {result.get('result')}")
        return result.get('result') == 'ok'

    def optimized_url(self, public_id, width=None, height=None, quality='auto'):
        transformations = [f'q_{quality}', 'f_auto']
        if width:
            transformations.append(f'w_{int(width)}')
        if height:
            transformations.append(f'h_{int(height)}')
        if width and height:
            transformations.append('c_fill')
        return f"{CLOUDINARY_DELIVERY_URL}/{self.cloud_name}/image/upload/{','.join(transformations)}/{public_id}"


def get_media_host():
    return MediaHost.from_config(current_app.config)
