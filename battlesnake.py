import logging
import threading
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

Coordinate = Tuple[int, int]

UP = 'up'
DOWN = 'down'
LEFT = 'left'
RIGHT = 'right'

# Engine convention: y grows downward
DIRECTION_VECTORS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

# Fixed order used when there is no food step to take
WANDER_ORDER = [UP, DOWN, RIGHT, LEFT]

DEFAULT_MOVE = RIGHT


class Board(NamedTuple):
    width: int
    height: int


class Snapshot(NamedTuple):
    """Everything one decision needs, rebuilt from each request payload"""
    board: Board
    body: List[Coordinate]
    food: List[Coordinate]
    turn: int = 0
    game_id: Optional[str] = None

    @property
    def head(self) -> Optional[Coordinate]:
        return self.body[0] if self.body else None


class UnknownRouteError(LookupError):
    """Raised by SnakeHandler.process for a uri it does not serve"""


def _as_int(value: Any, default: int = 0) -> int:
    # bool is an int subclass but never a valid board value
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


def _as_dict(value: Any) -> Dict:
    return value if isinstance(value, dict) else {}


def _parse_points(points: Any) -> List[Coordinate]:
    """Turn a list of {"x": .., "y": ..} dicts into coordinates, skipping junk"""
    if not isinstance(points, list):
        return []

    coords = []
    for point in points:
        if not isinstance(point, dict):
            continue
        x, y = point.get('x'), point.get('y')
        if isinstance(x, bool) or isinstance(y, bool):
            continue
        if isinstance(x, int) and isinstance(y, int):
            coords.append((x, y))
    return coords


def parse_game_state(game_state: Any) -> Snapshot:
    """
    Build a Snapshot from a raw request payload.

    Missing or malformed fields fall back to zero values (0x0 board, empty
    body, no food, turn 0) so a degenerate payload still gets a move.
    """
    game_state = _as_dict(game_state)
    board = _as_dict(game_state.get('board'))
    you = _as_dict(game_state.get('you'))
    game = _as_dict(game_state.get('game'))

    game_id = game.get('id')
    if game_id is not None:
        game_id = str(game_id)

    return Snapshot(
        board=Board(_as_int(board.get('width')), _as_int(board.get('height'))),
        body=_parse_points(you.get('body')),
        food=_parse_points(board.get('food')),
        turn=_as_int(game_state.get('turn')),
        game_id=game_id,
    )


class BattlesnakeLogic:
    """Greedy food seeker with a fixed-priority wander when no food is around"""

    def __init__(self):
        self.directions = [UP, DOWN, LEFT, RIGHT]

    def get_move(self, game_state: Dict) -> str:
        """Main function to determine the next move"""
        snapshot = parse_game_state(game_state)
        logger.debug("Turn %s: head=%s board=%sx%s food=%s",
                     snapshot.turn, snapshot.head,
                     snapshot.board.width, snapshot.board.height, snapshot.food)
        return self.choose_move(snapshot.board, snapshot.body, snapshot.food)

    def choose_move(self, board: Board, body: List[Coordinate], food: List[Coordinate]) -> str:
        """Pick one direction for the head; always returns a direction"""
        if not body:
            logger.debug("No body to move, defaulting to %s", DEFAULT_MOVE)
            return DEFAULT_MOVE

        neighbors = self.get_neighbors(body[0])

        move = None
        if food:
            move = self.seek_food(board, body, food[0], neighbors)
        if move is None:
            # Blocked toward food, or no food at all
            move = self.wander(board, body, neighbors)

        if move is None:
            logger.debug("No safe move found, defaulting to %s", DEFAULT_MOVE)
            return DEFAULT_MOVE

        logger.debug("Choosing: %s", move)
        return move

    def seek_food(self, board: Board, body: List[Coordinate], target: Coordinate,
                  neighbors: Dict[str, Coordinate]) -> Optional[str]:
        """Step toward target, horizontal axis first, vertical second"""
        head = body[0]
        rel_x = head[0] - target[0]
        rel_y = head[1] - target[1]

        if rel_x > 0 and self.is_position_safe(neighbors[LEFT], board, body):
            return LEFT
        if rel_x < 0 and self.is_position_safe(neighbors[RIGHT], board, body):
            return RIGHT
        if rel_y > 0 and self.is_position_safe(neighbors[DOWN], board, body):
            return DOWN
        if rel_y < 0 and self.is_position_safe(neighbors[UP], board, body):
            return UP
        return None

    def wander(self, board: Board, body: List[Coordinate],
               neighbors: Dict[str, Coordinate]) -> Optional[str]:
        """First safe direction in WANDER_ORDER"""
        for direction in WANDER_ORDER:
            if self.is_position_safe(neighbors[direction], board, body):
                return direction
        return None

    def get_neighbors(self, head: Coordinate) -> Dict[str, Coordinate]:
        """The four cells around head, unchecked"""
        return {direction: self.get_new_position(head, direction)
                for direction in self.directions}

    def get_new_position(self, head: Coordinate, direction: str) -> Coordinate:
        """Calculate new head position for a given direction"""
        dx, dy = DIRECTION_VECTORS[direction]
        return (head[0] + dx, head[1] + dy)

    def is_out_of_bounds(self, pos: Coordinate, board: Board) -> bool:
        """Check if position is outside board boundaries"""
        x, y = pos
        # Edges are inclusive: a cell at x == width is still on the board
        return x < 0 or x > board.width or y < 0 or y > board.height

    def is_position_safe(self, pos: Coordinate, board: Board, body: List[Coordinate]) -> bool:
        """Quick check if a position is safe"""
        if self.is_out_of_bounds(pos, board):
            return False

        # Whole body counts, tail included
        return pos not in body


class GameSession:
    """
    Body bookkeeping for one game.

    Lets a caller simulate turns locally: the body grows by one when the
    head lands on food, otherwise the tail is dropped. SnakeHandler.move
    leaves each session holding the body projected one turn past the
    last snapshot; callers read it through SnakeHandler.get_session.
    Never shared between games.
    """

    def __init__(self, game_id: Optional[str], body: Optional[List[Coordinate]] = None):
        self.game_id = game_id
        self.body = list(body or [])
        self.turn = 0

    @property
    def head(self) -> Optional[Coordinate]:
        return self.body[0] if self.body else None

    @property
    def length(self) -> int:
        return len(self.body)

    def sync(self, snapshot: Snapshot):
        """Take the engine's view of the body as the truth"""
        self.body = list(snapshot.body)
        self.turn = snapshot.turn

    def advance(self, direction: str, food: List[Coordinate]) -> List[Coordinate]:
        """Move the head one step and return the resulting body"""
        if not self.body:
            return []

        dx, dy = DIRECTION_VECTORS[direction]
        head = self.body[0]
        new_head = (head[0] + dx, head[1] + dy)

        self.body.insert(0, new_head)
        if new_head not in food:
            self.body.pop()
        self.turn += 1
        return list(self.body)


class SnakeHandler:
    """Lifecycle calls made by the game engine, plus per-game sessions"""

    COSMETICS = {"color": "#ff00ff", "headType": "beluga", "tailType": "bolt"}

    def __init__(self, logic: Optional[BattlesnakeLogic] = None):
        self.logic = logic or BattlesnakeLogic()
        self.sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()
        self.routes = {
            '/ping': lambda game_state: self.ping(),
            '/start': self.start,
            '/move': self.move,
            '/end': self.end,
        }

    def process(self, uri: str, game_state: Any) -> Optional[Dict[str, str]]:
        """Dispatch a call by uri; errors are logged and answered with None"""
        try:
            logger.info("%s called with: %s", uri, game_state)
            route = self.routes.get(uri)
            if route is None:
                raise UnknownRouteError(f"Strange call made to the snake: {uri}")
            response = route(game_state)
            logger.info("Responding with: %s", response)
            return response
        except Exception:
            logger.warning("Something went wrong with %s", uri, exc_info=True)
            return None

    def ping(self) -> Dict[str, str]:
        return {}

    def start(self, game_state: Any) -> Dict[str, str]:
        snapshot = parse_game_state(game_state)
        if snapshot.game_id is not None:
            with self._lock:
                self.sessions[snapshot.game_id] = GameSession(snapshot.game_id, snapshot.body)
            logger.info("Game %s started: head=%s length=%d",
                        snapshot.game_id, snapshot.head, len(snapshot.body))
        return dict(self.COSMETICS)

    def move(self, game_state: Any) -> Dict[str, str]:
        snapshot = parse_game_state(game_state)
        move = self.logic.choose_move(snapshot.board, snapshot.body, snapshot.food)

        session = self.get_session(snapshot.game_id)
        if session is not None:
            session.sync(snapshot)
            projected = session.advance(move, snapshot.food)
            logger.debug("Game %s turn %d: projected length %d",
                         session.game_id, snapshot.turn, len(projected))

        return {"move": move}

    def end(self, game_state: Any) -> Dict[str, str]:
        snapshot = parse_game_state(game_state)
        if snapshot.game_id is not None:
            with self._lock:
                self.sessions.pop(snapshot.game_id, None)
            logger.info("Game %s ended", snapshot.game_id)
        return {}

    def get_session(self, game_id: Optional[str]) -> Optional[GameSession]:
        if game_id is None:
            return None
        with self._lock:
            return self.sessions.get(game_id)
