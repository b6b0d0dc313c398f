# backend/run.py
import sys
import uvicorn
from smeta.config import settings

def main():
    try:
        uvicorn.run(
            "smeta.main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=settings.is_development
        )
    except Exception as e:
        print(f"Error starting the server: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
