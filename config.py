import logging
import os
from dotenv import load_dotenv

load_dotenv()

FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID', 'sparkdeck-8d613')

API_BASE_URL = os.getenv('SPARKDECK_API_URL', 'http://localhost:8000')
ID_TOKEN = os.getenv('SPARKDECK_ID_TOKEN')
HTTP_TIMEOUT = float(os.getenv('SPARKDECK_HTTP_TIMEOUT', '15'))

HOST = os.getenv('SPARKDECK_HOST', '127.0.0.1')
PORT = int(os.getenv('SPARKDECK_PORT', '8000'))

DB_PATH = os.getenv(
    'SPARKDECK_DB_PATH',
    os.path.join(os.path.dirname(os.path.abspath(__file__)), 'sparkdeck.db')
)
CACHE_DIR = os.getenv(
    'SPARKDECK_CACHE_DIR',
    os.path.join(os.path.expanduser('~'), '.sparkdeck')
)
CACHE_ORIGIN = os.getenv('SPARKDECK_ORIGIN', 'default')

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
