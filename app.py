"""Process entry point: ``flask --app app run``."""

from src.srtrack.srtrack.main import create_app

app = create_app()


if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"])
