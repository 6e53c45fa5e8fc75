# --- THE CANONICAL CONSTANTS FOR THE PREDATOR / PREY / CANNIBAL ECOSYSTEM ---

# World & Timing Parameters (world size is in tiles, positions are in world units)
WORLD_WIDTH = 50; WORLD_HEIGHT = 50
TILE_SIZE = 32
DT = 1.0 / 30.0                 # Simulated seconds per tick

# Initial population (per variant)
INITIAL_GRAZERS = 20
INITIAL_HUNTERS = 8
INITIAL_CANNIBALS = 3

# Population floors: when a count drops below the floor, spawn TOP_UP fresh agents
GRAZER_FLOOR = 5;   GRAZER_TOP_UP = 3
HUNTER_FLOOR = 2;   HUNTER_TOP_UP = 1
CANNIBAL_FLOOR = 1; CANNIBAL_TOP_UP = 1

# --- REPRODUCTION ---
REPRODUCTION_CHANCE = 0.01      # Per tick, per eligible agent
PAIRING_RADIUS = 100.0
OFFSPRING_OFFSET = 20.0         # Child lands within +/- this of the parent on each axis
REPRODUCTION_ENERGY_BAR = 0.7   # Fraction of max energy required to reproduce

# --- GENETICS ---
MUTATION_CHANCE = 0.2
MUTATION_AMOUNT = 0.2
CROSSOVER_MEAN_CHANCE = 0.5

# --- METABOLISM & MOVEMENT ---
BASE_CONSUMPTION = 0.5
SIZE_CONSUMPTION = 0.1
TURN_RATE = 2.0
FLEE_TURN_RATE = 4.0
FLEE_SPEED_FACTOR = 1.2
FLEE_ENERGY_DRAIN = 0.5
WANDER_CHANCE = 0.1             # Multiplied by dt
WANDER_ANGLE = 30.0
WANDER_SPEED_FACTOR = 0.5
BOUNCE_DAMPING = -0.5

# --- TERRAIN EFFECTS ---
WATER_DRAG = 0.9
MOUNTAIN_DRAG = 0.7
SNOW_DRAG = 0.8
SNOW_ENERGY_DRAIN = 0.05

# --- FEEDING (Grazers) ---
FEED_THRESHOLD = 0.7
FEED_RATE = 10.0
FEED_DAMPING = 0.3

# --- HUNTING (Hunters & Cannibals) ---
HUNGRY_THRESHOLD = 0.4
SATED_THRESHOLD = 0.8
HUNT_CHANCE = 0.7
ATTACK_REWARD = 30.0

# --- PREDATION RESOLVER ---
PREDATION_BASE = 0.6
PREDATION_STRENGTH_WEIGHT = 0.4
PREDATION_SPEED_WEIGHT = 0.3
PREDATION_ENERGY_PER_SIZE = 15.0

# --- BASE STATS PER VARIANT ---
GRAZER_STATS = {
    'max_speed': 60.0, 'size': 4.0, 'energy': 50.0, 'max_energy': 80.0, 'max_age': 60.0,
    'plant_detection': 100.0, 'predator_detection': 150.0,
    'reproduction_cooldown': 10.0, 'retention': 0.6,
}
HUNTER_STATS = {
    'max_speed': 70.0, 'size': 6.0, 'energy': 100.0, 'max_energy': 150.0, 'max_age': 80.0,
    'prey_detection': 200.0, 'attack_range': 10.0, 'attack_strength': 30.0,
    'reproduction_cooldown': 15.0, 'hunting_cooldown': 2.0, 'retention': 0.7,
}
CANNIBAL_STATS = dict(HUNTER_STATS, max_speed=65.0, size=7.0, energy=120.0, max_energy=180.0, max_age=70.0)
CANNIBAL_FACTOR_BASE = 0.3

# Genome scaling: attribute -> (trait name, default trait value, scale factor)
# attribute = base * (1 + trait * k - k / 2)
TRAIT_SCALING = {
    'size': ('size', 0.2, 0.2),
    'max_speed': ('speed', 0.3, 0.3),
    'max_energy': ('energy', 0.2, 0.2),
    'plant_detection': ('perception', 0.4, 0.4),
    'predator_detection': ('perception', 0.3, 0.3),
    'prey_detection': ('perception', 0.4, 0.4),
    'attack_strength': ('strength', 0.3, 0.3),
}
CANNIBALISM_SCALING = ('cannibalism', 0.5, 0.5)
RESOLVER_STRENGTH_DEFAULT = 0.3
RESOLVER_SPEED_DEFAULT = 0.3

# Experiment Harness & Chronicle
MAX_TICKS_PER_RUN = 3000
MAX_SIMULATION_RUNS = 1
TICKER_INTERVAL = 500

ACTION_SPAWN = 0.0; ACTION_BIRTH = 1.0; ACTION_DEATH_AGE = 2.0
ACTION_DEATH_STARVATION = 3.0; ACTION_PREDATE = 4.0; ACTION_FLOOR_SPAWN = 5.0

# --- THE CANONICAL GENOME STRUCTURE ---
GENOME_KEYS = [
    'size', 'speed', 'energy', 'perception', 'strength', 'reproduction', 'adaption'
]
