# run.py
import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

if __name__ == "__main__":
    from chaoscrypt.core.config import HOST, PORT, IS_PRODUCTION

    # reload only while developing
    uvicorn.run("chaoscrypt.main:app", host=HOST, port=PORT, reload=not IS_PRODUCTION)
