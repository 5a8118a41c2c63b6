"""
Configuration module for the call relay.

Key components:
- constants: Fixed values shared across modules, including the voice and persona
  for the Realtime session, event type names for both sides of the bridge, and the
  set of Realtime events worth logging.
- settings: Environment-driven values (API key, port, models, webhook URL, timeouts),
  with an optional .env file loaded by python-dotenv.
- logging_config: Console and rotating file logging for the ``call_relay`` logger.

Usage examples:
```python
from call_relay.config.constants import LOGGER_NAME, VOICE
from call_relay.config.settings import require_api_key

from call_relay.config.logging_config import configure_logging
logger = configure_logging()
api_key = require_api_key()  # exits the process if OPENAI_API_KEY is missing
```
"""
