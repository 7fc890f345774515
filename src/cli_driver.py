# cli_driver.py
# This file is intended to be run to play the 2048 game on the CLI.
# The board and score are saved between runs (see GAME2048_STORE_PATH).

import logging
from typing import List

from game_rules import GameProgressState, determine_game_status
from move_engine import Cell, Direction
from session import GameSession
from settings import load_settings

KEY_DIRECTIONS = {'W': Direction.UP, 'A': Direction.LEFT, 'S': Direction.DOWN, 'D': Direction.RIGHT}


def main():
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    session = GameSession(settings)
    display_session(session)

    while True:
        move_input = input("Enter move (W/A/S/D to move, U to undo, N for new game, Q to quit): ").strip().upper()

        if move_input == 'Q':
            print("Quitting game. Your board is saved.")
            break
        if move_input == 'N':
            session.new_game()
        elif move_input == 'U':
            if not session.undo():
                print("Nothing to undo.")
                continue
        elif move_input in KEY_DIRECTIONS:
            if session.game_over:
                print("The game has ended. Press N for a new game or U to undo.")
                continue
            result = session.play(KEY_DIRECTIONS[move_input])
            if not result.moved:
                print("Move did not change the board. Try a different direction.")
                continue
            if result.gained:
                print(f"+{result.gained}")
        else:
            print("Invalid input. Use W, A, S, D, U, N or Q.")
            continue

        display_session(session)
        if session.game_over:
            if session.won:
                print(f"Congratulations! You made the {settings.win_tile} tile!")
            else:
                print("No more moves possible. Press N for a new game or U to undo.")


# --- Display Functions ---

def format_cell(cell: Cell) -> str:
    return "." if cell is None else str(cell)


def render_board(board: List[List[Cell]]) -> str:
    """Renders the board as tab-separated rows."""
    return "\n".join("\t".join(format_cell(cell) for cell in row) for row in board)


def display_session(session: GameSession):
    """Prints the board, score, and game status to the console."""
    progress = determine_game_status(session.board, session.settings.win_tile)
    status_message = {
        GameProgressState.IN_PROGRESS: f"Status: {progress.name}",
        GameProgressState.GAME_WON: "YOU WON!",
        GameProgressState.GAME_OVER: "GAME OVER!"
    }
    print(f"\nScore: {session.score}    Undo available: {session.history_depth}")
    print(status_message[progress])
    print(render_board(session.board))
    print("-" * (len(session.board[0]) * 8))


if __name__ == "__main__":
    main()
