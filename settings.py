# Centralized tunables for the neural infiltration simulation.

# Window
WIDTH = 1280
HEIGHT = 800
FPS = 60

# Network generation
NODE_COUNT = 75
MIN_CONNECTIONS = 2
MAX_CONNECTIONS = 5
NETWORK_WIDTH = 1600
NETWORK_HEIGHT = 1000
MIN_NODE_DISTANCE = 70.0
EDGE_DISTANCE_MULT = 3.0  # candidate edges must be shorter than MIN_NODE_DISTANCE * this
EDGE_ANGLE_PENALTY = 0.75  # extra cost for a candidate pointing where an edge already goes
EDGE_CROWDED_DEG = 35.0
PLACEMENT_PADDING = 50.0
PLACEMENT_ATTEMPTS = 100
PLACEMENT_JITTER = 0.45  # fraction of the mean node spacing

# Force-directed relaxation (cosmetic)
FORCE_ITERATIONS = 120
FORCE_REPULSION = 5000.0
FORCE_ATTRACTION = 0.01
FORCE_DAMPING = 0.9
FORCE_MIN_MOVEMENT = 0.1
SEPARATION_PASSES = 60
SEPARATION_EPSILON = 0.5  # pairs are pushed this far past the minimum

# Simplified network (main path + decoration)
MAIN_PATH_HOPS = 4  # Entry + 3 relays + Core
PATH_SPACING = 45.0
SPHERE_RADIUS = 360.0
DECORATIVE_NODE_COUNT = 400
INNER_NODE_COUNT = 200
DECORATIVE_MIN_DISTANCE = 12.0
DECORATIVE_ATTEMPTS = 50
DECORATIVE_EDGE_COUNT = 80
DECORATIVE_EDGE_MIN_DISTANCE = 10.0
DECORATIVE_EDGE_MAX_DISTANCE = 60.0

# Vision
EXPLORER_VISION_RADIUS = 3

# Pursuer
PURSUER_BASE_SPEED = 0.2  # hops per second
PURSUER_SPEED_RAMP = 0.003  # multiplier gain per second
PURSUER_MAX_SPEED = 1.0
PURSUER_HACK_SEC = 5.0
PURSUER_PUSHBACK_HOPS = 3
PURSUER_RESET_SPEED_DECAY = 0.5
SHOW_PURSUER_PATH = False

# Puzzles: tier -> grid size / checkpoint count
PUZZLE_GRID_SIZES = {1: 4, 2: 4, 3: 5}
PUZZLE_CHECKPOINTS = {1: 4, 2: 4, 3: 6}
PUZZLE_MUST_FILL_ALL = False
PUZZLE_ATTEMPTS = 50
PUZZLE_STEP_BUDGET = 2000

# Protector resources
INITIAL_RESOURCES = 30
MAX_RESOURCES = 100
BLOCK_COST = 15
FIREWALL_BASE_REWARD = 10  # granted per completed round
FIREWALL_ROUND_MULTIPLIER = 1

# Rounds
MAX_ROUNDS = 3

# Colors
BACKGROUND_COLOR = (26, 26, 46)
FOG_COLOR = (26, 32, 44)
TEXT_COLOR = (180, 190, 210)
NODE_NORMAL_COLOR = (74, 85, 104)
NODE_ACTIVATED_COLOR = (72, 187, 120)
NODE_ENTRY_COLOR = (66, 153, 225)
NODE_CORE_COLOR = (237, 137, 54)
NODE_BLOCKED_COLOR = (229, 62, 62)
EDGE_DORMANT_COLOR = (74, 85, 104)
EDGE_ACTIVE_COLOR = (72, 187, 120)
EDGE_SOLVING_COLOR = (236, 201, 75)
EDGE_BLOCKED_COLOR = (229, 62, 62)
EDGE_PURSUER_COLOR = (159, 122, 234)
EDGE_FAILED_COLOR = (160, 40, 40)
PURSUER_COLOR = (229, 62, 62)
EXPLORER_COLOR = (66, 153, 225)
NODE_RADIUS = 12
CORE_RADIUS = 20
