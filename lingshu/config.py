from pathlib import Path

# Define the Project Root
BASE_DIR = Path(__file__).resolve().parent.parent

# Environment file (loaded by the entry points)
ENV_FILE = BASE_DIR / ".env"

# 1. Gemini
API_KEY_ENV = "GOOGLE_API_KEY"
FALLBACK_API_KEY_ENV = "GEMINI_API_KEY"
MODEL_ENV = "LINGSHU_MODEL"
DEFAULT_MODEL_ID = "gemini-2.5-flash"

# 2. Mock Exam
QUIZ_SIZE = 10

# 3. Admin Panel
ADMIN_PAGE_SIZE = 20
