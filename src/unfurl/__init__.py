from dotenv import load_dotenv

# Load environment variables from .env as early as possible so the settings
# built at startup see the configured values.
load_dotenv()
