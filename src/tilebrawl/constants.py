BOARD_SIZE = 8
MATCH_MIN = 3
# Regenerations tried before accepting a board with no valid swap.
MAX_RESHUFFLE_ATTEMPTS = 50

# Five matchable colors plus the immovable countdown color.
TILE_TYPES = ('red', 'blue', 'green', 'yellow', 'purple')
COUNTDOWN_TYPE = 'grey'

# Countdown tiles start appearing at this level with the given per-cell chance.
COUNTDOWN_START = 3
COUNTDOWN_MIN_LEVEL = 3
COUNTDOWN_SPAWN_CHANCE = 0.05
COUNTDOWN_VALUE_MULTIPLIER = 3

# Chebyshev radius of a bomb explosion (2 -> 5x5 block).
BOMB_RADIUS = 2

# Seconds before the combo counter lapses, per combo mode.
COMBO_TIMER = {
    'unified': 3.0,
    'per_color': 5.0,
}
# Seconds between enemy attacks.
ATTACK_INTERVAL = 3.0
# Pause between marking matched tiles and refilling the board.
SETTLE_DELAY = 0.3

STARTING_LEVEL = 1
STARTING_ENEMY_HEALTH = 100
STARTING_ENEMY_ATTACK = 5
STARTING_PLAYER_HEALTH = 100
STARTING_XP_THRESHOLD = 10
STARTING_BASE_BLOCK_VALUE = 1

# What clearing a color does for the player.
EFFECT_HEAL = 'heal'
EFFECT_XP = 'xp'
EFFECT_GOLD = 'gold'
EFFECT_DAMAGE = 'damage'

COLOR_EFFECTS = {
    'green': EFFECT_HEAL,
    'blue': EFFECT_XP,
    'yellow': EFFECT_GOLD,
    'red': EFFECT_DAMAGE,
    'purple': EFFECT_DAMAGE,
}
