"""Fixed wordlist for generate_passphrase()."""

WORDLIST = (
    "abandon",
    "ability",
    "absent",
    "absorb",
    "abstract",
    "access",
    "accident",
    "account",
    "achieve",
    "acoustic",
    "acquire",
    "across",
    "action",
    "actor",
    "adapt",
    "address",
    "adjust",
    "admit",
    "adult",
    "advance",
    "advice",
    "aerobic",
    "afford",
    "agent",
    "agree",
    "ahead",
    "airport",
    "aisle",
    "alarm",
    "album",
    "alcohol",
    "alert",
    "alien",
    "alley",
    "almond",
    "alpha",
    "already",
    "amateur",
    "amazing",
    "amber",
    "amount",
    "anchor",
    "ancient",
    "anger",
    "angle",
    "animal",
    "ankle",
    "answer",
    "antenna",
    "anxiety",
    "apart",
    "apple",
    "april",
    "arcade",
    "arctic",
    "arena",
    "argue",
    "armor",
    "arrow",
    "artist",
    "aspect",
    "asset",
    "atlas",
    "atom",
    "attic",
    "auction",
    "august",
    "aunt",
    "autumn",
    "avocado",
    "awake",
    "badge",
    "bamboo",
    "banana",
    "banner",
    "barrel",
    "basket",
    "battery",
    "beach",
    "beacon",
    "bean",
    "beauty",
    "believe",
    "bench",
    "berry",
    "bicycle",
    "birch",
    "biscuit",
    "blanket",
    "blossom",
    "board",
    "bonus",
    "border",
    "bottle",
    "boulder",
    "bracket",
    "branch",
    "breeze",
    "brick",
    "bridge",
    "brisk",
    "bronze",
    "bubble",
    "bucket",
    "buffalo",
    "bundle",
    "butter",
    "cabin",
    "cable",
    "cactus",
    "camera",
    "canal",
    "candle",
    "canoe",
    "canvas",
    "canyon",
    "captain",
    "carbon",
    "carpet",
    "castle",
    "catalog",
    "cattle",
    "cedar",
    "celery",
    "cement",
    "census",
    "cereal",
    "chalk",
    "chamber",
    "chapter",
    "charcoal",
    "cherry",
    "chimney",
    "cinnamon",
    "circus",
    "citizen",
    "clarify",
    "climb",
    "clock",
    "cloud",
    "cobalt",
    "coconut",
    "comet",
    "copper",
    "coral",
    "cotton",
    "cousin",
    "cradle",
    "crater",
    "cricket",
    "crystal",
    "cupboard",
    "current",
    "cushion",
    "dancer",
    "dawn",
    "debate",
    "decade",
    "delta",
    "desert",
    "device",
    "diamond",
    "diesel",
    "dinner",
    "dolphin",
    "domain",
    "donkey",
    "dragon",
    "drawer",
    "dream",
    "drift",
    "eagle",
    "earth",
    "echo",
    "eclipse",
    "elbow",
    "elder",
    "ember",
    "emerald",
    "empire",
    "engine",
    "enjoy",
    "episode",
    "equator",
    "escape",
    "essay",
    "evening",
    "exotic",
    "fabric",
    "falcon",
    "famous",
    "feather",
    "fence",
    "ferry",
    "festival",
    "fiber",
    "fiction",
    "filter",
    "flame",
    "flavor",
    "fluid",
    "forest",
    "fossil",
    "fountain",
    "fragile",
    "galaxy",
    "garden",
    "garlic",
    "gentle",
    "giant",
    "ginger",
    "glacier",
    "globe",
    "gospel",
    "gravel",
    "guitar",
    "habit",
    "hammer",
    "harbor",
    "harvest",
    "hazel",
    "helmet",
    "hermit",
    "hollow",
    "honey",
    "horizon",
    "hybrid",
    "iceberg",
    "impulse",
    "indoor",
    "island",
    "ivory",
    "jacket",
    "jaguar",
    "jungle",
    "kernel",
    "kettle",
    "kitten",
    "ladder",
    "lagoon",
    "lantern",
    "laptop",
    "lemon",
    "library",
    "lizard",
    "lobster",
    "lunar",
    "magnet",
    "mango",
    "marble",
    "meadow",
    "melody",
    "mirror",
    "monkey",
    "mosaic",
    "mountain",
    "museum",
    "napkin",
    "nectar",
    "noodle",
    "oasis",
    "ocean",
    "olive",
    "orbit",
    "orchard",
    "oyster",
    "paddle",
    "palace",
    "panda",
    "parrot",
    "pepper",
    "pilot",
    "planet",
    "pocket",
    "puzzle",
    "quartz",
    "rabbit",
    "radar",
    "raven",
    "ribbon",
    "rocket",
    "saddle",
    "salmon",
    "sapphire",
    "scarlet",
    "shadow",
    "silver",
    "spiral",
    "summit",
    "tiger",
    "timber",
    "tunnel",
    "velvet",
    "violin",
    "walnut",
    "whisper",
    "willow",
    "window",
    "winter",
    "wizard",
    "yellow",
    "zebra",
)
