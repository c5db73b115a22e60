from shiny import App, run_app

from sparkboard.config import SERVER_HOST, SERVER_PORT
from sparkboard.layout import app_ui
from sparkboard.server import server

app = App(app_ui, server)


def main() -> None:
    run_app(
        app,
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=False,
        ws_ping_interval=10,  # send ping every 10 s
        ws_ping_timeout=300,  # wait up to 5 min for pong (handles throttled/backgrounded tabs)
    )


if __name__ == "__main__":
    main()
