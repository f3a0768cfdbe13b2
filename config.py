import os
from pathlib import Path
from loguru import logger
from dotenv import load_dotenv

load_dotenv()


class Config:
    """app configuration"""

    # API stuff
    API_TITLE = "Vyapar Sahayak: GST Compliance Assistant"
    API_VERSION = "1.0.0"
    API_HOST = os.getenv("API_HOST", "127.0.0.1")
    API_PORT = int(os.getenv("API_PORT", "3000"))

    # OpenAI config (optional - template responses are used without it)
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_TEMPERATURE = float(os.getenv("OPENAI_TEMPERATURE", "0.3"))
    TEXT_GENERATION_TIMEOUT = float(os.getenv("TEXT_GENERATION_TIMEOUT", "20"))  # seconds per attempt

    # retrieval settings
    MAX_RESULTS = 3

    # upload settings
    ALLOWED_EXTENSIONS = {".csv"}

    # directories
    BASE_DIR = Path(__file__).parent
    KNOWLEDGE_DIR = Path(os.getenv("KNOWLEDGE_DIR", str(BASE_DIR / "knowledge-base")))

    @classmethod
    def ensure_directories(cls):
        """create necessary directories"""
        directories = [
            cls.KNOWLEDGE_DIR,
        ]

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

    @classmethod
    def validate_configuration(cls):
        """validate config and check for issues"""
        issues = []

        if cls.TEXT_GENERATION_TIMEOUT <= 0:
            issues.append("TEXT_GENERATION_TIMEOUT must be positive")

        if cls.MAX_RESULTS < 1:
            issues.append("MAX_RESULTS must be at least 1")

        # make sure directories exist
        cls.ensure_directories()

        # no API key is fine, the template generator takes over
        if not cls.OPENAI_API_KEY:
            logger.warning("OPENAI_API_KEY not set - using template responses")

        # log any issues
        for issue in issues:
            logger.error(f"Config issue: {issue}")

        if len(issues) == 0:
            return True
        return False
