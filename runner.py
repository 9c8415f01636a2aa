import logging
import os
from kindergarten import create_app

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
logger = logging.getLogger(__name__)


def main():
    port = int(os.environ.get('PORT', 5000))
    flask_app = create_app()
    logger.info(f"Starting Flask application on port {port}...")
    flask_app.run(host='0.0.0.0', port=port, debug=False, use_reloader=False)


if __name__ == '__main__':
    main()
