import sys
from config import settings


def main():
    """
    Infinytix entry point.
    Starts the dashboard web server.
    """
    from ui.app import app

    print("📈 Infinytix - Stock Dashboard Initializing...")
    print(f"🌐 Serving on http://{settings.HOST}:{settings.PORT}")
    print(f"🤖 AI generation: {'enabled' if settings.AI_ENABLED else 'disabled (synthetic data)'}")
    print(f"📂 Log Directory: {settings.LOG_DIR}")

    app.run(host=settings.HOST, port=settings.PORT, debug=False)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n🛑 Execution interrupted by user.")
        sys.exit(0)
    except Exception as e:
        print(f"\n🔥 Fatal System Error: {e}")
        sys.exit(1)
