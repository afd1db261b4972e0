"""Constants for curriculum structure recognition."""

# Seniority tiers, in curriculum order. Each one is a sub-directory of the root.
LEVELS = ["junior", "mid", "senior", "lead"]

# Files inside a level directory that are not modules
IGNORED_FILENAMES = {"readme.md", "index.md"}

CONFIG_FILENAME = ".curriculum-lint.yml"

# Canonical section names every module must carry
DEFAULT_REQUIRED_SECTIONS = [
    "Learning Objectives",
    "Time Estimate",
    "Common Mistakes",
    "Exercises",
    "Further Reading",
    "Navigation",
]

DEFAULT_CHAPTER_COUNT_MIN = 5
DEFAULT_CHAPTER_COUNT_MAX = 8

# Section aliases (normalized heading text -> canonical name)
SECTION_ALIASES = {
    "learning objectives": "Learning Objectives",
    "objectives": "Learning Objectives",
    "learning goals": "Learning Objectives",
    "what you will learn": "Learning Objectives",
    "what youll learn": "Learning Objectives",
    "time estimate": "Time Estimate",
    "estimated time": "Time Estimate",
    "time required": "Time Estimate",
    "duration": "Time Estimate",
    "common mistakes": "Common Mistakes",
    "common pitfalls": "Common Mistakes",
    "pitfalls": "Common Mistakes",
    "mistakes to avoid": "Common Mistakes",
    "exercises": "Exercises",
    "practice exercises": "Exercises",
    "hands on exercises": "Exercises",
    "practice": "Exercises",
    "further reading": "Further Reading",
    "additional resources": "Further Reading",
    "resources": "Further Reading",
    "references": "Further Reading",
    "navigation": "Navigation",
    "module navigation": "Navigation",
    "prerequisites": "Prerequisites",
    "prerequisite": "Prerequisites",
    "overview": "Overview",
    "introduction": "Overview",
    "summary": "Summary",
    "key takeaways": "Summary",
    "recap": "Summary",
}

# Level-2 headings whose level-3 children are the chapters
CHAPTER_CONTAINERS = {"chapters", "lessons"}

# Navigation marker labels (normalized) -> direction
NAVIGATION_LABELS = {
    "previous": "previous",
    "prev": "previous",
    "previous module": "previous",
    "next": "next",
    "next module": "next",
}

# Marker values that explicitly declare "no link"
EMPTY_LINK_VALUES = {"none", "n/a", "na", "-", "—", "–", ""}

# Voice heuristic vocabulary
SECOND_PERSON_TOKENS = {"you", "your", "yours", "yourself", "yourselves", "you'll", "you're", "you've"}
DEVIATING_VOICE_TOKENS = {"we", "our", "ours", "us", "let's", "we'll", "we're", "we've"}
DEVIATING_VOICE_PHRASES = ["the reader", "the learner", "the student", "the developer"]

DEFAULT_VOICE_THRESHOLD = 0.25
DEFAULT_VOICE_MIN_DEVIATIONS = 3
