DEBUG_EXECUTION = False
DEBUG_DETAILED = False

# Storage order used to pick the axis when neither "axis" nor "order" is given.
DEFAULT_STORAGE_ORDER = "NCHW"

# If True, all rows of a strided block copy are moved with a single sliced
# assignment. If False, every row is copied with its own call.
VECTORIZED_COPY = True
