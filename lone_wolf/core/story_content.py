from __future__ import annotations

from .models import Follower, GameEvent, Item, StatDeltas
from .story import StoryNode

ROOT_NODE_ID = 1

SALMON = Item(name="Salmon", kind="food", effect_value=30, description="A fat river salmon, still cold.")
ANTLER_TINE = Item(name="Antler Tine", kind="tool", effect_value=0, description="A shed elk tine, sharp enough to score bark.")
BONE_SHARD = Item(name="Bone Shard", kind="tool", effect_value=0, description="A split elk bone with a hard edge.")
MOONSTONE = Item(name="Moonstone", kind="key_item", effect_value=0, description="A pale stone the old packs revered.")


def default_story_nodes() -> list[StoryNode]:
    """The fixed winter narrative. Root first; ids are stable across releases."""
    return [
        StoryNode(
            id=1,
            scenario_text="Cast out of the Greyfang pack, you stand alone where the forest meets the first snow.",
            choice_a_text="Follow the river south",
            choice_b_text="Climb into the mountains",
            left=2,
            right=3,
        ),
        StoryNode(
            id=2,
            scenario_text="The river valley is loud with meltwater and thick with the smell of game.",
            choice_a_text="Fish at the rapids",
            choice_b_text="Shadow the elk herd",
            left=4,
            right=5,
            on_enter=StatDeltas(energy=-5),
            grants_item=ANTLER_TINE,
        ),
        StoryNode(
            id=3,
            scenario_text="The mountain pass is thin air and loose stone. Snow groans on the slopes above.",
            choice_a_text="Shelter in a cave",
            choice_b_text="Cross the ridge at night",
            left=6,
            right=7,
            on_enter=StatDeltas(energy=-15),
            scripted_event=GameEvent(
                title="Avalanche Warning",
                description="Snow breaks loose further up the slope; you scramble clear.",
                priority=2,
                effects=StatDeltas(energy=-10),
            ),
        ),
        StoryNode(
            id=4,
            scenario_text="Salmon leap at the rapids. One lands almost at your paws.",
            choice_a_text="Rest on the bank",
            choice_b_text="Follow the scent of other wolves",
            left=8,
            right=9,
            grants_item=SALMON,
        ),
        StoryNode(
            id=5,
            scenario_text="The elk herd moves as one animal. The young ones stray at the edges.",
            choice_a_text="Single out a calf",
            choice_b_text="Let them pass",
            left=10,
            right=11,
            on_enter=StatDeltas(energy=-10),
            scripted_event=GameEvent(
                title="Stampede",
                description="The herd turns on you and hooves churn the snow.",
                priority=1,
                effects=StatDeltas(health=-15),
            ),
        ),
        StoryNode(
            id=6,
            scenario_text="The cave is dry and littered with old bones. Something large sleeps deeper in.",
            choice_a_text="Wake the sleeper",
            choice_b_text="Slip out through the back tunnel",
            left=12,
            right=13,
            grants_item=BONE_SHARD,
        ),
        StoryNode(
            id=7,
            scenario_text="Starlight on the ridge. A pale stone glows in a crack of the rock.",
            choice_a_text="Howl to the stars",
            choice_b_text="Descend to the frozen lake",
            left=14,
            right=15,
            on_enter=StatDeltas(health=-10),
            grants_item=MOONSTONE,
        ),
        StoryNode(
            id=8,
            scenario_text="You doze on the warm stones while the river runs on.",
            choice_a_text="Press on downstream",
            left=16,
            on_enter=StatDeltas(energy=20),
        ),
        StoryNode(
            id=9,
            scenario_text="A young hunter named Ash trails the same scent. Ash falls in beside you.",
            choice_a_text="Score your mark with the antler tine",
            choice_b_text="Challenge the pack's leader",
            left=17,
            right=18,
            recruits=Follower(name="Ash", role="hunter", loyalty=50),
            scripted_event=GameEvent(
                title="Rival Scent",
                description="Markings everywhere warn you off this ground.",
                priority=3,
                effects=StatDeltas(reputation=-5),
            ),
            choice_a_requires="Antler Tine",
        ),
        StoryNode(
            id=10,
            scenario_text="The calf falls. You eat well for the first time in weeks.",
            is_ending=True,
            ending_description="Fed and strong, you claim the valley as your own territory.",
            ending_outcome="victory",
            on_enter=StatDeltas(hunger=-40),
        ),
        StoryNode(
            id=11,
            scenario_text="The herd thunders away and takes the valley's food with it.",
            is_ending=True,
            ending_description="Winter closes in on an empty valley. You do not see the thaw.",
            ending_outcome="defeat",
        ),
        StoryNode(
            id=12,
            scenario_text="The bear wakes hungry.",
            is_ending=True,
            ending_description="The cave was never yours to take.",
            ending_outcome="defeat",
            on_enter=StatDeltas(health=-60),
        ),
        StoryNode(
            id=13,
            scenario_text="The back tunnel narrows to a wall of fallen rock with cold air beyond.",
            choice_a_text="Dig through with the bone shard",
            choice_b_text="Wait in the dark",
            left=19,
            right=20,
            choice_a_requires="Bone Shard",
        ),
        StoryNode(
            id=14,
            scenario_text="Your howl rolls down the valley, and far away a scout named Sable answers.",
            choice_a_text="Offer the moonstone to the answering pack",
            choice_b_text="Walk the ridge alone",
            left=21,
            right=22,
            on_enter=StatDeltas(reputation=10),
            recruits=Follower(name="Sable", role="scout", loyalty=50),
            choice_a_requires="Moonstone",
        ),
        StoryNode(
            id=15,
            scenario_text="The lake ice sings under your weight, then cracks.",
            is_ending=True,
            ending_description="The black water takes you under.",
            ending_outcome="defeat",
            on_enter=StatDeltas(health=-100),
        ),
        StoryNode(
            id=16,
            scenario_text="Downstream the valley widens into empty hunting ground.",
            is_ending=True,
            ending_description="You live out the winter alone, but you live.",
            ending_outcome="victory",
        ),
        StoryNode(
            id=17,
            scenario_text="The strange pack accepts your gift and makes room at the den.",
            is_ending=True,
            ending_description="You have a pack again.",
            ending_outcome="victory",
            on_enter=StatDeltas(reputation=20),
        ),
        StoryNode(
            id=18,
            scenario_text="The leader is older, heavier and not alone.",
            is_ending=True,
            ending_description="Driven off and bleeding, you limp into the snow.",
            ending_outcome="defeat",
            on_enter=StatDeltas(health=-50),
        ),
        StoryNode(
            id=19,
            scenario_text="You break through into a hidden den below the peaks.",
            is_ending=True,
            ending_description="The mountain den is yours, and others will come to it.",
            ending_outcome="victory",
        ),
        StoryNode(
            id=20,
            scenario_text="The dark goes on and on.",
            is_ending=True,
            ending_description="Lost in the tunnels, you never find the sky again.",
            ending_outcome="defeat",
        ),
        StoryNode(
            id=21,
            scenario_text="The pack leader takes the moonstone and lowers her head to you.",
            is_ending=True,
            ending_description="You lead the Moon Pack into spring.",
            ending_outcome="victory",
            on_enter=StatDeltas(reputation=30),
        ),
        StoryNode(
            id=22,
            scenario_text="The ridge runs on forever under the stars.",
            is_ending=True,
            ending_description="A lone wolf to the end, and a free one.",
            ending_outcome="victory",
        ),
    ]
