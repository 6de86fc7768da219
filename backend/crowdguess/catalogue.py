"""Built-in prompts for the preset-prompt game.

Each prompt describes a simple drawing; the player names what it shows.
"""

from .models import PresetPrompt

PRESET_PROMPTS: tuple[PresetPrompt, ...] = (
    PresetPrompt(id=1, prompt_text="A triangle sitting on top of a square",
                 answer="house", alternative_answers=["home", "hut"],
                 difficulty="easy", category="everyday"),
    PresetPrompt(id=2, prompt_text="A circle on top of a tall thin rectangle",
                 answer="tree", alternative_answers=["lollipop", "plant"],
                 difficulty="easy", category="nature"),
    PresetPrompt(id=3, prompt_text="Two circles joined by a straight bar",
                 answer="dumbbell", alternative_answers=["weight", "barbell"],
                 difficulty="easy", category="everyday"),
    PresetPrompt(id=4, prompt_text="A dome with wavy lines hanging underneath",
                 answer="jellyfish", alternative_answers=["jelly fish", "squid"],
                 difficulty="medium", category="animals"),
    PresetPrompt(id=5, prompt_text="A circle with short lines radiating all around it",
                 answer="sun", alternative_answers=["star"],
                 difficulty="easy", category="nature"),
    PresetPrompt(id=6, prompt_text="A long oval with a triangle at one end and a dot near the other",
                 answer="fish", alternative_answers=[],
                 difficulty="easy", category="animals"),
    PresetPrompt(id=7, prompt_text="A rectangle with two circles underneath and a smaller rectangle on top",
                 answer="car", alternative_answers=["automobile", "truck"],
                 difficulty="easy", category="vehicles"),
    PresetPrompt(id=8, prompt_text="A half circle resting on a vertical line with a hook at the bottom",
                 answer="umbrella", alternative_answers=["parasol"],
                 difficulty="medium", category="everyday"),
    PresetPrompt(id=9, prompt_text="A tall triangle with three horizontal stripes and a flag on top",
                 answer="mountain", alternative_answers=["peak", "summit"],
                 difficulty="medium", category="nature"),
    PresetPrompt(id=10, prompt_text="A spiral inside a circle with a small cone beneath it",
                 answer="ice cream", alternative_answers=["icecream", "cone"],
                 difficulty="medium", category="food"),
    PresetPrompt(id=11, prompt_text="Two overlapping triangles forming a six-pointed shape",
                 answer="star", alternative_answers=["hexagram"],
                 difficulty="hard", category="shapes"),
    PresetPrompt(id=12, prompt_text="A square with a smaller square inside and a cross dividing it",
                 answer="window", alternative_answers=["frame"],
                 difficulty="hard", category="everyday"),
)


def get_preset_prompt(prompt_id: int, catalogue=PRESET_PROMPTS) -> PresetPrompt | None:
    return next((p for p in catalogue if p.id == prompt_id), None)
