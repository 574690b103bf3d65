from medibook import create_app

from dotenv import load_dotenv
import os

load_dotenv()
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "5000"))
DEBUG = os.getenv("FLASK_DEBUG", "false").lower() in ("1", "true", "yes")

app = create_app()

def main():
    app.run(host=HOST, port=PORT, debug=DEBUG)

if __name__ == "__main__":
    main()
