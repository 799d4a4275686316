from typing import Dict, List, Optional

STYLE_TO_TONE: Dict[str, str] = {
    "informative": "professional",
    "educational": "professional",
    "professional": "professional",
    "casual": "casual",
    "conversational": "conversational",
    "friendly": "casual",
    "inspirational": "inspirational",
    "motivational": "inspirational",
    "humorous": "humorous",
    "funny": "humorous",
    "analytical": "analytical",
}

TONE_DESCRIPTORS: Dict[str, List[str]] = {
    "professional": ["clear", "concise", "authoritative", "informative"],
    "casual": ["friendly", "approachable", "conversational", "relatable"],
    "conversational": ["engaging", "natural", "approachable", "warm"],
    "inspirational": ["uplifting", "motivational", "encouraging", "positive"],
    "humorous": ["witty", "light-hearted", "playful", "entertaining"],
    "analytical": ["detailed", "logical", "data-driven", "thorough"],
    "technical": ["precise", "detailed", "specialized", "expert-level"],
    "engaging": ["interactive", "captivating", "interesting", "dynamic"],
    "authoritative": ["expert", "commanding", "credible", "definitive"],
    "storytelling": ["narrative", "descriptive", "immersive", "compelling"],
    "persuasive": ["convincing", "influential", "compelling", "strategic"],
    "insightful": ["perceptive", "thoughtful", "illuminating", "astute"],
    "visionary": ["forward-thinking", "innovative", "pioneering", "futuristic"],
    "educational": ["instructive", "explanatory", "informative", "enlightening"],
    "empathetic": ["understanding", "compassionate", "supportive", "sensitive"],
    "controversial": ["provocative", "challenging", "thought-provoking", "bold"],
}

EMOJI_GUIDANCE: Dict[str, str] = {
    "professional": "Use emojis sparingly, only where they add meaningful context",
    "casual": "Use emojis naturally to enhance the friendly tone",
    "conversational": "Use emojis occasionally to emphasize key points",
    "inspirational": "Use positive and uplifting emojis to reinforce the motivational message",
    "humorous": "Use playful emojis to enhance the humorous tone",
    "analytical": "Limit emoji usage to data visualization contexts only",
}


def map_style_to_tone(style: Optional[str]) -> str:
    """Map a free-form writing style onto one of the supported tones."""
    if not style:
        return "professional"
    return STYLE_TO_TONE.get(style.strip().lower(), "professional")


def get_tone_descriptors(tone: str) -> List[str]:
    return TONE_DESCRIPTORS.get(tone, TONE_DESCRIPTORS["professional"])


def get_emoji_guidance(tone: str) -> str:
    return EMOJI_GUIDANCE.get(tone, "Use emojis sparingly and appropriately")
