"""
Entry point for the Ollama Model Viewer server

Usage:
    python3 main.py
"""
if __name__ == "__main__":
    from app.config import settings
    from app.main import run

    print(f"Starting server on http://{settings.HOST}:{settings.PORT}")
    print(f"Watching namespace '{settings.NAMESPACE}' for pods labelled '{settings.LABEL_SELECTOR}'")

    run()
