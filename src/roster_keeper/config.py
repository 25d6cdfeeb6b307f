"""Static roster configuration constants."""

STORAGE_KEY = "sports-team-manager-data"
DEFAULT_DATA_DIR = "."
DATA_DIR_ENV = "ROSTER_KEEPER_DATA_DIR"

TEAM_NAME_MAX = 100
TEAM_DESCRIPTION_MAX = 500
PLAYER_NAME_MAX = 100
PLAYER_NOTES_MAX = 1000

JERSEY_MIN = 0
JERSEY_MAX = 99
# Stand-in for a missing jersey number when sorting; always placed last.
UNNUMBERED_JERSEY = 999

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
PHONE_PATTERN = r"^[\d\s\-\(\)\+\.]{10,}$"

FULL_ROSTER_SIZE = 11
DEEP_ROSTER_SIZE = 15

COMMON_POSITIONS: dict[str, tuple[str, ...]] = {
    "soccer": ("Goalkeeper", "Defender", "Midfielder", "Forward"),
    "football": (
        "Quarterback",
        "Running Back",
        "Wide Receiver",
        "Tight End",
        "Offensive Line",
        "Defensive Line",
        "Linebacker",
        "Cornerback",
        "Safety",
    ),
    "basketball": ("Point Guard", "Shooting Guard", "Small Forward", "Power Forward", "Center"),
    "baseball": (
        "Pitcher",
        "Catcher",
        "First Base",
        "Second Base",
        "Third Base",
        "Shortstop",
        "Left Field",
        "Center Field",
        "Right Field",
    ),
    "hockey": ("Goalie", "Defenseman", "Left Wing", "Right Wing", "Center"),
    "volleyball": ("Setter", "Outside Hitter", "Middle Blocker", "Opposite", "Libero"),
    "default": ("Position 1", "Position 2", "Position 3", "Position 4", "Position 5"),
}
