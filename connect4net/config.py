"""
config.py - Runtime defaults for connect4net

Every value here can be overridden from the command line.
"""

import os

# Network play
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 54321
CONNECT_HOST = "127.0.0.1"

# Bot model
MODELS_DIR = "models"
DEFAULT_MODEL_PATH = os.path.join(MODELS_DIR, "policy.pt")
HIDDEN_SIZE = 32

# Policy gradient training
TRAIN_EPOCHS = 1000
MIN_ROLLOUT_STEPS = 5000
LEARNING_RATE = 1e-3

# Environment rewards, from the point of view of the learning player
REWARD_STEP = -1.0
REWARD_INVALID_MOVE = -5.0
REWARD_WIN = 100.0
REWARD_LOSE = -100.0

# Process exit codes
EXIT_OK = 0
EXIT_ERROR = 1  # transport failures and missing files
EXIT_DESYNC = 2
EXIT_INTERRUPTED = 130
