"""静态目录 -- 分类、图片包、生日主题、备用主题列表

运行期间不变。
"""

from .models import BirthdayTheme, Category, Difficulty, Pack

CATEGORIES: list[Category] = [
    Category(
        id="animals",
        label="Animals",
        icon="🐾",
        examples=["lion", "elephant", "dolphin", "giraffe", "penguin", "rabbit"],
    ),
    Category(
        id="vehicles",
        label="Vehicles",
        icon="🚗",
        examples=["rocket", "train", "boat", "helicopter", "bicycle", "truck"],
    ),
    Category(
        id="fantasy",
        label="Fantasy",
        icon="🦄",
        examples=["dragon", "unicorn", "fairy", "wizard", "mermaid", "phoenix"],
    ),
    Category(
        id="nature",
        label="Nature",
        icon="🌿",
        examples=["flower", "tree", "butterfly", "mountain", "rainbow", "waterfall"],
    ),
    Category(
        id="space",
        label="Space",
        icon="🚀",
        examples=["astronaut", "planet", "alien", "satellite", "moon", "comet"],
    ),
    Category(
        id="food",
        label="Food",
        icon="🍕",
        examples=["pizza", "cake", "ice cream", "burger", "cupcake", "fruit basket"],
    ),
    Category(
        id="holidays",
        label="Holidays",
        icon="🎄",
        examples=["christmas tree", "pumpkin", "easter egg", "snowman", "heart", "fireworks"],
    ),
    Category(
        id="characters",
        label="Characters",
        icon="🧸",
        examples=["robot", "princess", "superhero", "pirate", "knight", "astronaut"],
    ),
]

# 随机主题候选（按分类）
CATEGORY_TOPICS: dict[str, list[str]] = {
    "animals": ["lion", "elephant", "dolphin", "giraffe", "penguin",
                "rabbit", "tiger", "koala", "panda", "fox"],
    "vehicles": ["rocket", "train", "boat", "helicopter", "bicycle",
                 "truck", "submarine", "airplane", "car", "bus"],
    "fantasy": ["dragon", "unicorn", "fairy", "wizard", "mermaid",
                "phoenix", "pegasus", "elf", "castle", "wand"],
    "nature": ["flower", "tree", "butterfly", "mountain", "rainbow",
               "waterfall", "sunset", "garden", "mushroom", "leaf"],
    "space": ["astronaut", "planet", "alien", "satellite", "moon",
              "comet", "star", "rocket", "galaxy", "telescope"],
    "food": ["pizza", "cake", "ice cream", "burger", "cupcake",
             "fruit basket", "donut", "cookie", "sandwich", "apple"],
    "holidays": ["christmas tree", "pumpkin", "easter egg", "snowman", "heart",
                 "fireworks", "gift", "ornament", "candy cane", "balloon"],
    "characters": ["robot", "princess", "superhero", "pirate", "knight",
                   "astronaut", "detective", "chef", "dancer", "musician"],
}

PACKS: list[Pack] = [
    Pack(
        id="ocean-adventure",
        title="Ocean Adventure",
        emoji="🌊",
        description="Dive into the deep sea with fish, whales, and coral reefs",
        category="animals",
        difficulty=Difficulty.MEDIUM,
        age_range="5-8",
    ),
    Pack(
        id="jungle-safari",
        title="Jungle Safari",
        emoji="🦁",
        description="Explore the wild jungle with lions, elephants and more",
        category="animals",
        difficulty=Difficulty.MEDIUM,
        age_range="5-8",
    ),
    Pack(
        id="space-explorer",
        title="Space Explorer",
        emoji="🚀",
        description="Blast off into space with rockets, planets and aliens",
        category="space",
        difficulty=Difficulty.SIMPLE,
        age_range="5-8",
    ),
    Pack(
        id="fairy-tale",
        title="Fairy Tale Magic",
        emoji="🏰",
        description="Enter a magical world of dragons, unicorns and fairies",
        category="fantasy",
        difficulty=Difficulty.DETAILED,
        age_range="9-12",
    ),
    Pack(
        id="alphabet-fun",
        title="Alphabet Fun",
        emoji="🔤",
        description="Learn the alphabet A to Z with fun illustrated letters",
        category="alphabet",
        difficulty=Difficulty.SIMPLE,
        age_range="2-4",
    ),
    Pack(
        id="toddler-first",
        title="Toddler First Pages",
        emoji="🍼",
        description="Super simple pages with big shapes perfect for tiny hands",
        category="animals",
        difficulty=Difficulty.SIMPLE,
        age_range="2-4",
    ),
    Pack(
        id="vehicles-world",
        title="Vehicles World",
        emoji="🚗",
        description="Zoom through cars, trucks, trains and more",
        category="vehicles",
        difficulty=Difficulty.MEDIUM,
        age_range="5-8",
    ),
    Pack(
        id="christmas-pack",
        title="Christmas Pack",
        emoji="🎄",
        description="Festive holiday pages to color this Christmas season",
        category="holidays",
        difficulty=Difficulty.MEDIUM,
        age_range="5-8",
    ),
]

# LLM 不可用时按包 id 使用的主题列表，避免同分类的包拿到相同内容
PACK_FALLBACK_TOPICS: dict[str, list[str]] = {
    "ocean-adventure": [
        "clownfish", "blue whale", "sea turtle", "coral reef", "octopus",
        "stingray", "jellyfish", "seahorse", "crab", "lobster",
        "dolphin", "shark", "starfish", "anglerfish", "narwhal",
        "manta ray", "sea otter", "pufferfish", "barracuda", "electric eel",
        "hermit crab", "swordfish", "hammerhead shark", "flying fish",
    ],
    "jungle-safari": [
        "lion", "elephant", "giraffe", "monkey", "zebra",
        "tiger", "leopard", "gorilla", "hippopotamus", "rhinoceros",
        "cheetah", "crocodile", "parrot", "toucan", "wild boar",
        "flamingo", "warthog", "chimpanzee", "baboon", "wildebeest",
        "meerkat", "aardvark", "hyena", "okapi",
    ],
    "space-explorer": [
        "astronaut", "rocket launch", "saturn planet", "alien creature", "moon landing",
        "shooting star", "comet trail", "space station", "black hole", "meteor shower",
        "telescope", "nebula", "galaxy spiral", "sun flare", "mars rover",
        "ufo hovering", "solar panel", "space helmet", "asteroid belt", "jupiter storm",
        "saturn rings", "milky way", "space shuttle", "orbiting satellite",
    ],
    "fairy-tale": [
        "dragon", "unicorn", "fairy", "wizard", "mermaid",
        "phoenix", "griffin", "enchanted castle", "brave knight", "woodland elf",
        "cheerful dwarf", "sneaky goblin", "gentle giant", "wicked witch", "warlock",
        "centaur", "flying pegasus", "bridge troll", "garden gnome", "ocean siren",
        "sleeping basilisk", "sea kraken", "shield valkyrie", "desert sphinx",
    ],
    "alphabet-fun": [
        "letter A apple", "letter B butterfly", "letter C cat",
        "letter D dragon", "letter E elephant", "letter F frog",
        "letter G giraffe", "letter H horse", "letter I igloo",
        "letter J jellyfish", "letter K kangaroo", "letter L lion",
        "letter M monkey", "letter N narwhal", "letter O owl",
        "letter P penguin", "letter Q queen", "letter R rabbit",
        "letter S star", "letter T tiger", "letter U umbrella",
        "letter V volcano", "letter W whale", "letter X xylophone",
    ],
    "toddler-first": [
        "big sun", "fluffy cloud", "round ball", "little duck",
        "cute dog", "happy cat", "friendly fish", "big tree",
        "red apple", "yellow banana", "bouncy ball", "toy car",
        "teddy bear", "rubber duck", "colorful kite", "little house",
        "bright star", "big heart", "smiling flower", "baby bird",
        "soft bunny", "round balloon", "tiny bug", "ice cream cone",
    ],
    "vehicles-world": [
        "car", "truck", "train", "airplane", "helicopter",
        "sailboat", "bicycle", "motorcycle", "school bus", "submarine",
        "rocket", "tractor", "ambulance", "fire truck", "police car",
        "hot air balloon", "monster truck", "bulldozer", "scooter", "jet ski",
        "cable car", "space shuttle", "speedboat", "steam locomotive",
    ],
    "christmas-pack": [
        "santa claus", "reindeer", "christmas tree", "snowman", "elf",
        "gift box", "candy cane", "christmas stocking", "gingerbread man", "wreath",
        "snowflake", "angel", "nativity scene", "christmas star", "sleigh",
        "north pole", "christmas bell", "holly branch", "nutcracker", "ornament",
        "christmas village", "fireplace", "hot cocoa", "winter cottage",
    ],
}

# 包 id 无专属列表时按分类回退
CATEGORY_FALLBACK_TOPICS: dict[str, list[str]] = {
    "animals": [
        "lion", "elephant", "giraffe", "monkey", "zebra", "tiger", "bear", "dolphin",
        "whale", "penguin", "owl", "rabbit", "fox", "deer", "wolf", "koala",
        "panda", "parrot", "crocodile", "kangaroo", "flamingo", "cheetah", "gorilla",
        "seahorse",
    ],
    "vehicles": [
        "car", "truck", "train", "airplane", "helicopter", "boat", "bicycle",
        "motorcycle", "bus", "submarine", "rocket", "tractor", "ambulance",
        "fire truck", "police car", "sailboat", "hot air balloon", "monster truck",
        "forklift", "bulldozer", "scooter", "jet ski", "cable car", "space shuttle",
    ],
    "fantasy": [
        "dragon", "unicorn", "fairy", "wizard", "mermaid", "phoenix", "griffin",
        "castle", "knight", "elf", "dwarf", "goblin", "giant", "witch", "warlock",
        "centaur", "pegasus", "troll", "gnome", "siren", "basilisk", "kraken",
        "valkyrie", "sphinx",
    ],
    "space": [
        "astronaut", "rocket", "planet", "alien", "moon", "star", "comet",
        "satellite", "black hole", "meteor", "telescope", "space station", "nebula",
        "galaxy", "sun", "mars rover", "ufo", "solar panel", "space helmet",
        "asteroid belt", "jupiter", "saturn rings", "milky way", "space shuttle",
    ],
}


def get_pack(pack_id: str) -> Pack | None:
    """按 id 查询图片包定义"""
    for pack in PACKS:
        if pack.id == pack_id:
            return pack
    return None


def get_category(category_id: str) -> Category | None:
    """按 id 查询分类"""
    for category in CATEGORIES:
        if category.id == category_id:
            return category
    return None


def fallback_topics(pack: Pack, size: int) -> list[str]:
    """LLM 不可用时的包主题：包专属列表 -> 分类列表 -> "<title> page N" """
    topics = PACK_FALLBACK_TOPICS.get(pack.id) or CATEGORY_FALLBACK_TOPICS.get(pack.category)
    if topics:
        return list(topics[:size])
    return [f"{pack.title} page {i + 1}" for i in range(size)]


# 图库预热主题（按分类）
SEED_TOPICS: dict[str, list[str]] = {
    "animals": ["lion", "elephant", "dolphin", "giraffe", "penguin", "rabbit",
                "tiger", "bear", "cat", "dog", "horse", "monkey"],
    "vehicles": ["rocket", "train", "boat", "helicopter", "bicycle", "truck",
                 "car", "airplane", "bus", "submarine"],
    "fantasy": ["dragon", "unicorn", "fairy", "wizard", "mermaid", "phoenix", "castle", "knight"],
    "nature": ["flower", "tree", "butterfly", "mountain", "rainbow", "waterfall",
               "sun", "cloud", "leaf"],
    "space": ["astronaut", "planet", "alien", "satellite", "moon", "comet", "star", "ufo"],
    "food": ["pizza", "cake", "ice cream", "burger", "cupcake", "apple", "strawberry"],
    "holidays": ["christmas tree", "pumpkin", "snowman", "heart", "star"],
    "characters": ["robot", "princess", "superhero", "pirate", "knight", "ninja"],
}

BIRTHDAY_THEMES: list[BirthdayTheme] = [
    BirthdayTheme(id="unicorn", label="Unicorn", emoji="🦄"),
    BirthdayTheme(id="dinosaur", label="Dinosaur", emoji="🦖"),
    BirthdayTheme(id="princess", label="Princess", emoji="👑"),
    BirthdayTheme(id="superhero", label="Superhero", emoji="🦸"),
    BirthdayTheme(id="space", label="Space", emoji="🚀"),
    BirthdayTheme(id="mermaid", label="Mermaid", emoji="🧜"),
    BirthdayTheme(id="pirate", label="Pirate", emoji="🏴‍☠️"),
    BirthdayTheme(id="animals", label="Animals", emoji="🦁"),
    BirthdayTheme(id="cars", label="Cars", emoji="🏎️"),
    BirthdayTheme(id="fairy", label="Fairy", emoji="🧚"),
    BirthdayTheme(id="dragon", label="Dragon", emoji="🐉"),
    BirthdayTheme(id="ocean", label="Ocean", emoji="🐬"),
]

# 生日包固定页数
BIRTHDAY_PACK_SIZE = 6

BIRTHDAY_FALLBACK_TOPICS: dict[str, list[str]] = {
    "unicorn": ["birthday unicorn", "unicorn cake", "rainbow unicorn",
                "unicorn balloon", "magical unicorn", "unicorn crown"],
    "dinosaur": ["party dinosaur", "birthday trex", "dinosaur cake",
                 "triceratops balloon", "dinosaur hat", "raptor celebrating"],
    "princess": ["birthday princess", "princess cake", "princess crown",
                 "fairy princess", "princess carriage", "princess balloon"],
    "superhero": ["birthday superhero", "superhero cape", "superhero cake",
                  "flying superhero", "superhero badge", "hero celebrating"],
    "space": ["birthday rocket", "party astronaut", "alien celebrating",
              "planet birthday", "space cake", "moon celebration"],
    "mermaid": ["birthday mermaid", "mermaid cake", "underwater party",
                "mermaid crown", "mermaid balloon", "ocean celebration"],
    "pirate": ["pirate birthday", "treasure birthday", "pirate cake",
               "party ship", "pirate hat", "treasure chest cake"],
    "animals": ["birthday lion", "party elephant", "celebrating giraffe",
                "birthday bear", "party penguin", "birthday monkey"],
    "cars": ["birthday race car", "party truck", "monster truck cake",
             "racing birthday", "birthday bus", "party vehicle"],
    "fairy": ["birthday fairy", "fairy cake", "party fairy",
              "fairy balloon", "magical fairy", "flower fairy party"],
    "dragon": ["birthday dragon", "baby dragon cake", "party dragon",
               "dragon balloon", "dragon celebrating", "dragon with cake"],
    "ocean": ["birthday dolphin", "party whale", "celebrating octopus",
              "birthday seahorse", "party starfish", "ocean birthday"],
}

DEFAULT_BIRTHDAY_TOPICS: list[str] = [
    "birthday cake", "party balloon", "birthday hat",
    "celebration", "birthday candles", "party confetti",
]


def get_birthday_theme(theme_id: str) -> BirthdayTheme | None:
    """按 id 查询生日主题"""
    for theme in BIRTHDAY_THEMES:
        if theme.id == theme_id:
            return theme
    return None


def birthday_fallback_topics(theme_id: str) -> list[str]:
    """LLM 不可用时的生日包主题，未知主题使用通用列表"""
    return list(BIRTHDAY_FALLBACK_TOPICS.get(theme_id, DEFAULT_BIRTHDAY_TOPICS))
