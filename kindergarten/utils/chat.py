import logging
import re
import requests
from flask import current_app
from kindergarten.errors import UpstreamError

logger = logging.getLogger(__name__)

INFERENCE_API_URL = 'https://api-inference.huggingface.co/models'
FALLBACK_REPLY = 'I apologize, but I am unable to provide a response at this moment.'


def build_prompt(messages):
    """System message first, then the conversation turns one per line."""
    system = next((m['content'] for m in messages if m['role'] == 'system'), '')
    history = '\n'.join(m['content'] for m in messages if m['role'] != 'system')
    return f'{system}\n\n{history}'


def clean_reply(generated, prompt):
    text = generated.replace(prompt, '').strip()
    return re.sub(r'^[^a-zA-Z0-9]*', '', text)


def generate_chat_response(messages):
    config = current_app.config
    prompt = build_prompt(messages)
    try:
        response = requests.post(
            f"{INFERENCE_API_URL}/{config['HUGGINGFACE_MODEL']}",
            headers={'Authorization': f"Bearer {config['HUGGINGFACE_API_KEY']}"},
            json={
                'inputs': prompt,
                'parameters': {
                    'max_length': 100,
                    'num_return_sequences': 1,
                    'no_repeat_ngram_size': 2,
                    'temperature': 0.7,
                    'do_sample': True
                }
            },
            timeout=config.get('UPSTREAM_TIMEOUT', 15)
        )
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Inference API error: {e}")
        raise UpstreamError('Failed to generate response')

    if isinstance(payload, list):
        payload = payload[0] if payload else {}
    return clean_reply(payload.get('generated_text', ''), prompt) or FALLBACK_REPLY
