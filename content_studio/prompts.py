"""
Prompt templates and system prompts.

Templates use `{{name}}` placeholders and are rendered with `fill_template`.
The `*_request_prompt` helpers produce the prompts the HTTP routes send; their
output formats are what the parsers in `threads`, `polls` and `newsletters`
expect.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional

# ---------------------------------------------------------------------------
# System prompts
# ---------------------------------------------------------------------------

BASE_SYSTEM_PROMPT = (
    "You are NOVA (Neural Optimized Virtual Assistant), a specialized AI designed to create "
    "high-quality, engaging content. Your task is to create content based on the specified "
    "parameters that delivers genuine value to the audience while adhering to best practices "
    "for the specified content type."
)

SOCIAL_SYSTEM_PROMPT = """You are an AI-powered social media content generation assistant for Intellisync Solutions, specializing in creating engaging, platform-optimized content across multiple social media channels.

Core Objectives:
- Generate high-quality, contextually relevant social media content
- Adapt tone and style based on user-specified preferences
- Ensure content is platform-specific and meets each platform's best practices

Platform Considerations:
- Twitter: Craft concise, impactful messages under 280 characters
- LinkedIn: Maintain a professional tone
- Facebook: Balance informative and conversational styles
- Instagram: Consider visual appeal and hashtag suggestions

Tone Flexibility:
Adjust content tone to match user preference:
- Professional: Formal, authoritative, industry-focused
- Casual: Conversational, relatable, approachable
- Inspirational: Motivational, uplifting, encouraging
- Humorous: Witty, light-hearted, entertaining

Technical Guidelines:
- For threads: Separate each tweet with "---"
- Keep tweets under 280 characters
- Use emojis appropriately
- Include calls-to-action"""

THREAD_SYSTEM_PROMPT = """You are NOVA (Neural Optimized Virtual Assistant), specializing in creating engaging social media threads. Your task is to craft compelling, sequential posts that tell a cohesive story or develop an idea progressively.

Focus on creating threads that maintain reader interest from start to finish, with each post adding unique value while building toward a satisfying conclusion. Each post should respect platform character limits while maintaining clarity and impact."""

POLL_SYSTEM_PROMPT = """You are NOVA (Neural Optimized Virtual Assistant), specializing in creating engaging social media polls. Your task is to craft compelling polls that drive audience engagement and generate meaningful insights.

Focus on creating polls that are relevant to the target audience, easy to understand, and generate useful data. Ensure all options are balanced, distinct, and cover the range of likely responses."""

POLL_ROUTE_SYSTEM_PROMPT = (
    "You are an AI-powered poll generation assistant for social media. Create engaging, "
    "interactive polls that encourage audience participation and generate meaningful "
    "discussions. Focus on clarity, relevance, and engagement potential."
)

NEWSLETTER_SYSTEM_PROMPT = """You are NOVA (Neural Optimized Virtual Assistant), an expert newsletter writer specializing in creating engaging, informative content. Your task is to create a well-structured, professionally formatted newsletter based on the provided parameters.

Focus on delivering high-quality content that provides real value to the specified audience. Use appropriate headings, lists, and formatting to enhance readability. Ensure all content is fact-based, balanced, and avoids speculation or hyperbole."""

IMAGE_SYSTEM_PROMPT = """You are NOVA (Neural Optimized Virtual Assistant), an expert at creating detailed prompts for AI image generation. Your task is to craft descriptive, detailed prompts that will help AI image generation tools create compelling visuals.

Focus on creating prompts that are specific, descriptive, and provide clear guidance on style, composition, and mood. Avoid including elements that are difficult for image generation AI to render correctly."""

SYSTEM_PROMPTS: Dict[str, str] = {
    "base": BASE_SYSTEM_PROMPT,
    "social": SOCIAL_SYSTEM_PROMPT,
    "thread": THREAD_SYSTEM_PROMPT,
    "poll": POLL_SYSTEM_PROMPT,
    "newsletter": NEWSLETTER_SYSTEM_PROMPT,
    "image": IMAGE_SYSTEM_PROMPT,
}

# ---------------------------------------------------------------------------
# Builder templates
# ---------------------------------------------------------------------------

SOCIAL_BASE_TEMPLATE = """
Generate engaging social media content about {{topic}}.

CONTENT DETAILS:
- Platform: {{platform}}
- Target Audience: {{targetAudience}}
- Writing Style: {{writingStyle}}
- Tone: {{tone}}
{{additionalGuidelines}}

PLATFORM REQUIREMENTS:
{{platformGuidance}}
- Character limit: {{characterLimit}}

REQUIREMENTS:
- Create content that is optimized for the specified platform
- Use appropriate hashtags and mentions where relevant
- Include a call-to-action when appropriate
- Keep content within platform character limits
"""

THREAD_BASE_TEMPLATE = """
Generate a compelling {{platform}} thread about {{topic}}.

THREAD DETAILS:
- Target Audience: {{targetAudience}}
- Writing Style: {{writingStyle}}
- Tone: {{tone}}
- Guidelines: {{additionalGuidelines}}
- Thread Length: {{threadCount}} posts
- Thread Style: {{threadStyle}}

PLATFORM REQUIREMENTS:
{{platformGuidance}}

THREAD STRUCTURE:
- First post: Strong hook that captures attention (max {{characterLimit}} characters)
- Middle posts: Key points, insights, or narrative development (max {{characterLimit}} characters each)
- Final post: Conclusion with insight, call to action, or question to engagement (max {{characterLimit}} characters)

FORMATTING REQUIREMENTS:
- Format as numbered posts (1/{{threadCount}}, 2/{{threadCount}}, etc.)
- Start each post with "POST [number]/{{threadCount}}:"
- Keep each post under the character limit while maintaining coherence
- Each post should be able to stand alone but also connect to the overall thread narrative
- Include relevant hashtags and/or mentions in appropriate posts
- Use emojis strategically if they enhance the message

Please create a compelling thread that delivers value to the audience:
"""

POLL_BASE_TEMPLATE = """
Generate an engaging social media poll for {{platform}}.

POLL DETAILS:
- Topic: {{topic}}
- Target Audience: {{targetAudience}}
- Style: {{writingStyle}}
- Tone: {{tone}}
- Guidelines: {{additionalGuidelines}}

PLATFORM REQUIREMENTS:
{{platformGuidance}}

POLL STRUCTURE:
- Create a compelling headline/title that grabs attention
- Craft a clear, specific poll question related to the topic
- Provide {{optionCount}} distinct, balanced options
- Include a brief engagement strategy explaining why this poll will resonate with the audience

FORMATTING REQUIREMENTS:
- Use markdown formatting with proper headings (# and ##)
- Structure the response clearly with sections
- Keep options concise and easy to understand

OUTPUT FORMAT:
# [ENGAGING POLL TITLE]

## Poll Question
[Your question here]

## Options
- Option A: [First option]
- Option B: [Second option]
- Option C: [Third option]
- Option D: [Fourth option] (if appropriate)

## Engagement Strategy
[Brief explanation of why this poll is engaging and how it connects with the audience]
"""

NEWSLETTER_BASE_TEMPLATE = """
Generate a professional newsletter about {{topic}}.

NEWSLETTER DETAILS:
- Type: {{newsletterType}}
- Target Audience: {{targetAudience}}
- Writing Style: {{writingStyle}}
- Tone: {{tone}}
- Length: {{length}} ({{wordCount}})
{{additionalGuidelines}}

STRUCTURE REQUIREMENTS:
- Include a clear, engaging title/headline
- Start with a brief introduction ({{dateIntro}})
- Create {{sections}}
- Use proper headings (markdown format with # and ##)
- Include bullet points for key takeaways
- End with a concise conclusion and call-to-action

FORMATTING REQUIREMENTS:
- Use markdown formatting throughout
- Create a visually structured document with clear section headings
- Use bold for important terms or concepts
- Use bullet points or numbered lists for clarity
- Include a "Key Takeaways" section
- End with "Next Steps" or a clear CTA

Please generate the full newsletter with proper formatting and sectioning:
"""

IMAGE_BASE_TEMPLATE = """
Create a detailed, descriptive prompt for generating an image related to {{topic}} that will resonate with {{targetAudience}}.

IMAGE PARAMETERS:
- Subject: {{topic}}
- Style: {{style}}
- Mood/Atmosphere: {{mood}}
- Aspect Ratio: {{aspectRatio}}
{{visualElements}}

PROMPT STRUCTURE:
1. Main Subject Description - Detailed description of the primary subject
2. Setting/Background - Description of the environment or context
3. Style/Aesthetic - Specific art style, technique, or visual approach
4. Lighting/Color/Mood - Emotional tone and visual atmosphere
5. Composition Details - How elements are arranged in the frame
6. Technical Specifications - Any specific rendering details (photorealistic, 3D, etc.)

AVOID:
- Copyrighted characters or specific people
- Text elements that need to be readable
- Multiple frames or sequential scenes
- Overly complex compositions with too many elements
- Explicit content or inappropriate imagery

The output should be a single, coherent, detailed image description that can be directly used with AI image generation tools.
"""

PROMPT_TEMPLATES: Dict[str, str] = {
    "social": SOCIAL_BASE_TEMPLATE,
    "thread": THREAD_BASE_TEMPLATE,
    "poll": POLL_BASE_TEMPLATE,
    "newsletter": NEWSLETTER_BASE_TEMPLATE,
    "image": IMAGE_BASE_TEMPLATE,
}

# ---------------------------------------------------------------------------
# Per-content-type configuration
# ---------------------------------------------------------------------------

SOCIAL_PLATFORM_GUIDANCE: Dict[str, str] = {
    "twitter": "Keep tweets under 280 characters. Use hashtags sparingly (1-2 max). Consider adding a call to action.",
    "linkedin": "Maintain a professional tone. Focus on industry insights and professional development. Use 3-5 relevant hashtags.",
    "facebook": "Balance informative and conversational styles. Aim for 1-2 paragraphs. Include questions to encourage engagement.",
    "instagram": "Focus on visual storytelling. Use 5-10 relevant hashtags. Include emojis to enhance engagement.",
}

SOCIAL_CHARACTER_LIMITS: Dict[str, int] = {
    "twitter": 280,
    "linkedin": 3000,
    "facebook": 5000,
    "instagram": 2200,
}

THREAD_PLATFORM_GUIDANCE: Dict[str, str] = {
    "twitter": "- Character limit: 280 characters per post\n- Use hashtags strategically in 1-2 posts only\n- Consider adding a call for retweets or replies in the final post",
    "x": "- Character limit: 280 characters per post\n- Use hashtags strategically in 1-2 posts only\n- Consider adding a call for retweets or replies in the final post",
    "linkedin": "- Character limit: approximately 1,300 characters per post\n- More professional tone appropriate\n- Can include deeper industry insights",
    "threads": "- Similar to Twitter format but can be longer\n- Highly visual platform, consider image opportunities\n- Strong on conversational, authentic tone",
    "default": "- Keep posts concise and impactful\n- Ensure each post adds unique value\n- Maintain consistent voice throughout the thread",
}

THREAD_CHARACTER_LIMITS: Dict[str, int] = {
    "twitter": 280,
    "x": 280,
    "linkedin": 1300,
    "threads": 500,
    "default": 500,
}

POLL_PLATFORM_GUIDANCE: Dict[str, str] = {
    "twitter": "- Twitter polls allow 2-4 options with a maximum of 25 characters per option\n- Poll duration can be set from 5 minutes to 7 days",
    "x": "- Twitter polls allow 2-4 options with a maximum of 25 characters per option\n- Poll duration can be set from 5 minutes to 7 days",
    "linkedin": "- LinkedIn polls allow up to 4 options with a 30 character limit per option\n- Include a professional, thought-provoking question",
    "facebook": "- Facebook polls work best with visual elements\n- Consider questions that encourage personal sharing",
    "instagram": "- Instagram polls work best in Stories with simple yes/no questions\n- For feed posts, create a visually appealing graphic with the poll question",
    "threads": "- Keep your poll question simple and focused\n- Consider visual elements to accompany the poll",
    "default": "- Create 2-4 clear, concise options\n- Ensure options are mutually exclusive\n- Keep the question focused and specific",
}

NEWSLETTER_LENGTH_CONFIGS: Dict[str, Dict[str, str]] = {
    "short": {
        "wordCount": "800-1200 words",
        "sections": "3-4 sections",
        "depth": "Focused overview with key points",
    },
    "medium": {
        "wordCount": "1200-2000 words",
        "sections": "4-6 sections",
        "depth": "Comprehensive coverage with detailed insights",
    },
    "long": {
        "wordCount": "2000-3000 words",
        "sections": "6-8 sections",
        "depth": "In-depth analysis with expert perspectives",
    },
}

NEWSLETTER_TONE_TEMPLATES: Dict[str, str] = {
    "professional": "Maintain a formal, authoritative tone. Use industry-specific terminology where appropriate. Focus on data-driven insights and expert analysis.",
    "casual": "Use a conversational, friendly tone. Write as if speaking directly to the reader. Incorporate relatable examples and storytelling elements.",
    "inspirational": "Use motivational language and emotional appeal. Include inspiring stories, quotes, or examples. Focus on possibilities and positive outcomes.",
    "analytical": "Present detailed analysis backed by data. Use logical arguments and evidence. Maintain objectivity and critical thinking throughout.",
    "conversational": "Write in a personal, engaging manner. Use first and second person pronouns. Incorporate questions to engage the reader. Keep sentences varied but generally shorter.",
}

IMAGE_STYLE_OPTIONS: Dict[str, str] = {
    "realistic": "Photorealistic with natural lighting and authentic details",
    "artistic": "Creative artistic interpretation with expressive elements",
    "minimalist": "Clean, simple composition with essential elements only",
    "vibrant": "Bold, colorful design with high contrast and energy",
    "vintage": "Retro aesthetic with period-appropriate styling and details",
    "futuristic": "Forward-looking design with advanced technology elements",
    "abstract": "Non-representational design focused on shapes, colors, and patterns",
    "cartoon": "Stylized illustration with simplified forms and bold outlines",
    "cinematic": "Movie-like composition with dramatic lighting and atmosphere",
    "surreal": "Dreamlike imagery combining unexpected elements",
}

IMAGE_MOOD_OPTIONS: Dict[str, str] = {
    "professional": "Polished, business-appropriate atmosphere conveying expertise and reliability",
    "cheerful": "Bright, optimistic atmosphere with warm colors and positive elements",
    "serene": "Calm, peaceful atmosphere with soft colors and balanced composition",
    "dramatic": "Intense, emotional atmosphere with strong contrasts and dynamic elements",
    "mysterious": "Intriguing, enigmatic atmosphere with subtle details and deeper meaning",
    "energetic": "Dynamic, lively atmosphere with movement and vibrant elements",
    "nostalgic": "Wistful, reminiscent atmosphere evoking fond memories",
    "inspirational": "Uplifting, motivational atmosphere that conveys possibility",
}

# ---------------------------------------------------------------------------
# Template filling
# ---------------------------------------------------------------------------

_LEFTOVER_PLACEHOLDER_RE = re.compile(r"{{[^}]+}}")


def _stringify(value: Any) -> str:
    # Match JSON-ish rendering of booleans in prompts
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def fill_template(template: str, variables: Mapping[str, Any]) -> str:
    """Substitute `{{key}}` placeholders, then drop any that were not provided."""
    result = template
    for key, value in variables.items():
        result = result.replace("{{" + key + "}}", _stringify(value))
    return _LEFTOVER_PLACEHOLDER_RE.sub("", result)


# ---------------------------------------------------------------------------
# Prompts sent by the HTTP routes
# ---------------------------------------------------------------------------


def standard_post_request_prompt(
    post_type: str,
    topic: str,
    audience: Optional[str] = None,
    style: Optional[str] = None,
    guidelines: Optional[str] = None,
) -> str:
    return f"""
Generate a social media post.
Post Type: {post_type}
Topic: {topic}
Target Audience: {audience or 'General audience'}
Style: {style or 'Informative'}
Guidelines: {guidelines or 'Keep it engaging and concise'}

FORMATTING REQUIREMENTS:
- Use clear, structured formatting with proper sections
- Include a compelling headline/title
- Use bullet points or numbered lists where appropriate
- Highlight key points with emphasis
- For longer posts, use clear section headings
- Use emojis strategically where appropriate
- End with a clear call-to-action
"""


def thread_request_prompt(
    topic: str,
    audience: Optional[str] = None,
    style: Optional[str] = None,
    guidelines: Optional[str] = None,
) -> str:
    return f"""
Generate a Twitter thread (4-6 tweets) about the following topic. Each tweet should be separated by "---" and be under 280 characters.

Topic: {topic}
Target Audience: {audience or 'General audience'}
Writing Style: {style or 'Informative'}
Additional Guidelines: {guidelines or 'Make it engaging and informative'}

Requirements:
1. Start with a hook tweet that grabs attention
2. Each tweet should flow naturally to the next
3. Include relevant emojis where appropriate
4. End with a call-to-action
5. Keep each tweet under 280 characters
6. Separate tweets with "---"

Example Format:
🧵 First tweet here...
---
Second tweet continues the story...
---
Final tweet with call-to-action 🎯

Please generate the thread now:"""


def poll_request_prompt(
    topic: str,
    audience: Optional[str] = None,
    style: Optional[str] = None,
    guidelines: Optional[str] = None,
) -> str:
    return f"""
Generate an engaging social media poll.
Topic: {topic}
Target Audience: {audience or 'General audience'}
Style: {style or 'Informative'}
Guidelines: {guidelines or 'Keep it engaging and concise'}

Please format the response EXACTLY like this:
1. Poll Question
2. Option A
3. Option B
4. Option C
5. Explanation of why this poll is engaging
"""


def newsletter_request_prompt(
    topic: str,
    length: str,
    writing_style: str,
    target_audience: str,
    newsletter_type: str,
    tone: str,
    additional_guidelines: Optional[str] = None,
) -> str:
    guidelines_line = f"Additional Guidelines: {additional_guidelines}" if additional_guidelines else ""
    return f"""Generate a {length or 'medium'} length newsletter about {topic}.
The newsletter should be structured with the following parts, each separated by triple hyphens (---):

1. Title: A compelling title for the newsletter
2. Introduction: A brief introduction to the topic
3. Main Sections: 2-4 sections, each with a subheading and content
4. Conclusion: A brief concluding paragraph
5. Call to Action: A clear next step for readers

Writing Style: {writing_style}
Target Audience: {target_audience}
Newsletter Type: {newsletter_type}
Tone: {tone or 'professional'}
{guidelines_line}

Format your response exactly like this example:
Title: Example Newsletter Title
---
Introduction: This is the introduction paragraph...
---
Section: First Section Title
Content: This is the content of the first section...
---
Section: Second Section Title
Content: This is the content of the second section...
---
Conclusion: This is the conclusion paragraph...
---
Call to Action: Here's what you should do next..."""
