import os

from tgrelay.config import Settings
from tgrelay.main import configure_logging, create_app

settings = Settings.from_env()
configure_logging(settings.log_level)

app = create_app(settings)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 10000))
    app.run(host="0.0.0.0", port=port)
