from typing import Optional

from flask import Flask, request, jsonify

from battlesnake import SnakeHandler


DOCS_URL = "https://docs.battlesnake.com"


def create_battlesnake_server(handler: Optional[SnakeHandler] = None) -> Flask:
    """Create Flask server for Battlesnake"""
    app = Flask(__name__)
    snake_handler = handler or SnakeHandler()

    def dispatch():
        # A missing or broken body is handled like an empty snapshot
        game_state = request.get_json(silent=True) or {}
        response = snake_handler.process(request.path, game_state)
        return jsonify(response if response is not None else {})

    @app.route('/')
    def info():
        return jsonify({
            "apiversion": "1",
            "author": "greedy-snake",
            "color": snake_handler.COSMETICS["color"],
            "head": snake_handler.COSMETICS["headType"],
            "tail": snake_handler.COSMETICS["tailType"],
            "docs": DOCS_URL,
        })

    @app.route('/ping', methods=['POST'])
    def ping():
        return dispatch()

    @app.route('/start', methods=['POST'])
    def start():
        return dispatch()

    @app.route('/move', methods=['POST'])
    def move():
        return dispatch()

    @app.route('/end', methods=['POST'])
    def end():
        return dispatch()

    # Health check endpoint
    @app.route('/health')
    def health():
        return jsonify({"status": "healthy"})

    app.config["SNAKE_HANDLER"] = snake_handler
    return app


app = create_battlesnake_server()
