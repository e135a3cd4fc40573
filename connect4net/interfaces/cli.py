"""
cli.py - Command-line interface for connect4net

Commands:
    (none)                 two people play on one terminal
    server                 wait for an opponent and play as X
    address HOST:PORT      connect to a waiting opponent and play as O
    generate               print games of random self-play
    train                  train the policy-gradient bot
    bot                    play against the trained bot on one terminal
"""

import argparse
import os
import random
import sys
from typing import Callable, Dict, List, Optional

from connect4net import __version__, config
from connect4net.debug import debug, DebugLevel
from connect4net.errors import DesyncError, InvalidColumnError, ParseError, TransportError
from connect4net.game.rules import ConnectFourGame
from connect4net.interfaces.move_sources import BotMoveSource, ConsoleMoveSource, MoveSource
from connect4net.net.session import COLUMN_ERROR, Session, result_message
from connect4net.utils import WIDTH, GameResult, Player, parse_column


def play_local_game(sources: Dict[Player, MoveSource],
                    display: Callable[[str], None] = print) -> GameResult:
    """
    Play a game on one machine, each player taking moves from its source.

    Rejected input is reported and the same player is asked again.

    Returns:
        The final game result
    """
    game = ConnectFourGame()
    display(f"Input a column 1-{WIDTH}")

    while not game.is_game_over():
        player = game.current_player
        text = sources[player].next_move(game.board.copy(), player)
        try:
            game.play(parse_column(text))
        except (ParseError, InvalidColumnError) as e:
            debug.debug(f"Local move rejected: {e}", "cli")
            display(COLUMN_ERROR)
            continue
        display(game.render())

    display(result_message(game.result))
    return game.result


def load_bot(path: str):
    """Load the trained bot, importing torch only when a bot is needed."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"No trained model at {path}; run the 'train' command first")

    from connect4net.ai.policy import PolicyBot
    return PolicyBot.load(path)


def local_source(args) -> MoveSource:
    if getattr(args, 'bot', None):
        return BotMoveSource(load_bot(args.bot))
    return ConsoleMoveSource()


# --- Command handlers ---

def handle_local(args) -> int:
    """Two people take turns on this terminal."""
    console = ConsoleMoveSource(announce_player=True)
    play_local_game({Player.ONE: console, Player.TWO: console})
    return config.EXIT_OK


def handle_bot(args) -> int:
    """Play X on this terminal against the trained bot as O."""
    bot_source = BotMoveSource(load_bot(args.model))
    play_local_game({Player.ONE: ConsoleMoveSource(), Player.TWO: bot_source})
    return config.EXIT_OK


def handle_server(args) -> int:
    """
    Wait for one opponent and play as X.

    Args:
        args: Parsed arguments with host, port and an optional bot model

    Returns:
        Process exit status
    """
    from connect4net.net.server import listen

    source = local_source(args)
    transport = listen(args.host, args.port,
                       on_listening=lambda addr: print(f"Listening on {addr[0]}:{addr[1]}"))
    print("Opponent connected. You are X and move first.")
    Session(transport, Player.ONE, source).run()
    return config.EXIT_OK


def handle_address(args) -> int:
    """
    Connect to a waiting opponent and play as O.

    Args:
        args: Parsed arguments with the target address and an optional bot model

    Returns:
        Process exit status
    """
    from connect4net.net.server import connect

    source = local_source(args)
    transport = connect(args.target)
    print("Connected. You are O; X moves first.")
    Session(transport, Player.TWO, source).run()
    return config.EXIT_OK


def handle_generate(args) -> int:
    """Print `args.count` games of random self-play."""
    rng = random.Random(args.seed)
    for i in range(args.count):
        if i:
            print()
        print(ConnectFourGame.generate(rng).summary())
    return config.EXIT_OK


def handle_train(args) -> int:
    """
    Train the bot and save it to `args.model`.

    An interrupted run still saves the model trained so far.
    """
    from connect4net.ai.policy import PolicyBot, train

    bot = PolicyBot.load(args.model) if args.resume and os.path.exists(args.model) else PolicyBot()
    print(f"Training for {args.epochs} epochs of at least {args.steps} steps")
    def report(stats):
        print(f"epoch: {stats['epoch']:<3} episodes: {stats['episodes']:<5} "
              f"avg reward per episode: {stats['avg_reward']:.2f}")

    try:
        train(bot, epochs=args.epochs, min_steps=args.steps, seed=args.seed, on_epoch=report)
    except KeyboardInterrupt:
        print("\nTraining interrupted. Saving current model...")
    bot.save(args.model)
    print(f"Model saved to {args.model}")
    return config.EXIT_OK


HANDLERS = {
    None: handle_local,
    'server': handle_server,
    'address': handle_address,
    'generate': handle_generate,
    'train': handle_train,
    'bot': handle_bot,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='connect4net',
        description='Connect Four on one terminal or across two machines',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
    Examples:

    # Two people on one terminal
    python run.py

    # Host a game and wait for an opponent (you play X)
    python run.py server --port 54321

    # Join a hosted game (you play O)
    python run.py address 192.168.1.20:54321

    # Print three random self-play games
    python run.py generate --count 3 --seed 7

    # Train the bot, then play against it
    python run.py train --epochs 200
    python run.py bot
    """)
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--debug_level',
                        choices=[level.name.lower() for level in DebugLevel],
                        default='warning',
                        help='Logging verbosity (default: warning)')
    parser.add_argument('--log_file', type=str, default=None,
                        help='Also write log output to this file')

    subparsers = parser.add_subparsers(dest='command', help='Command to run (default: local game)')

    server_parser = subparsers.add_parser('server', help='Wait for an opponent and play as X')
    server_parser.add_argument('--host', default=config.DEFAULT_HOST,
                               help=f'Address to listen on (default: {config.DEFAULT_HOST})')
    server_parser.add_argument('--port', type=int, default=config.DEFAULT_PORT,
                               help=f'Port to listen on (default: {config.DEFAULT_PORT})')
    server_parser.add_argument('--bot', type=str, default=None, metavar='MODEL',
                               help='Let the trained bot at MODEL play instead of you')

    address_parser = subparsers.add_parser('address', help='Connect to HOST:PORT and play as O')
    address_parser.add_argument('target', help='Address of the waiting opponent, HOST:PORT')
    address_parser.add_argument('--bot', type=str, default=None, metavar='MODEL',
                                help='Let the trained bot at MODEL play instead of you')

    generate_parser = subparsers.add_parser('generate', help='Print random self-play games')
    generate_parser.add_argument('--count', type=int, default=1, help='Number of games (default: 1)')
    generate_parser.add_argument('--seed', type=int, default=None, help='Random seed')

    train_parser = subparsers.add_parser('train', help='Train the policy-gradient bot')
    train_parser.add_argument('--epochs', type=int, default=config.TRAIN_EPOCHS,
                              help=f'Training epochs (default: {config.TRAIN_EPOCHS})')
    train_parser.add_argument('--steps', type=int, default=config.MIN_ROLLOUT_STEPS,
                              help=f'Minimum steps per epoch (default: {config.MIN_ROLLOUT_STEPS})')
    train_parser.add_argument('--model', type=str, default=config.DEFAULT_MODEL_PATH,
                              help=f'Where to save the model (default: {config.DEFAULT_MODEL_PATH})')
    train_parser.add_argument('--resume', action='store_true',
                              help='Continue training the model saved at --model')
    train_parser.add_argument('--seed', type=int, default=None, help='Random seed')

    bot_parser = subparsers.add_parser('bot', help='Play against the trained bot')
    bot_parser.add_argument('--model', type=str, default=config.DEFAULT_MODEL_PATH,
                            help=f'Trained model to load (default: {config.DEFAULT_MODEL_PATH})')

    return parser


def configure_debug(args) -> None:
    debug.set_from_string(args.debug_level)
    if args.log_file:
        debug.configure(log_file=args.log_file)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_debug(args)

    if args.command == 'address':
        from connect4net.net.server import parse_address
        try:
            parse_address(args.target)
        except ValueError as e:
            parser.error(str(e))

    handler = HANDLERS[args.command]
    try:
        return handler(args)
    except DesyncError as e:
        print(f"Opponent is out of sync, ending the game: {e}")
        return config.EXIT_DESYNC
    except TransportError as e:
        print(f"Connection error, ending the game: {e}")
        return config.EXIT_ERROR
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return config.EXIT_ERROR
    except (EOFError, KeyboardInterrupt):
        print("\nInput closed, leaving the game.")
        return config.EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
