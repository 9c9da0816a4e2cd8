"""
Configuration for the perceptron engine.
"""

# Training
DEFAULT_ITERATIONS = 1           # Passed to the update strategy's init()
DEFAULT_STRATEGY = "averaged"    # "trivial", "averaged"
SHOW_PROGRESS = False            # Wrap the training stream in a tqdm bar

# Hand-off channel between a corpus producer and train()
CHANNEL_MAXSIZE = 1024           # 0 means unbounded

# Persistence
PERSIST_FORMAT = "structperc.weights"
PERSIST_VERSION = 1
PICKLE_PROTOCOL = 4

# Logging
LOG_LEVEL = "INFO"
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"
