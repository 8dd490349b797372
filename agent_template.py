import random

# Copy this file into agents/ and implement decide_move() to control your bot.
# Valid moves: 'none', 'north', 'south', 'east', 'west'

class Agent:
    def __init__(self, name: str):
        self.name = name

    def decide_move(self, game_state) -> str:
        """
        Decide next move based on the provided game_state (GameState dataclass).
        Accessible fields:
            - game_state.arena_length (int)
            - game_state.you (your agent's name, str)
            - game_state.positions (dict name -> (x, y)), north is y - 1
            - game_state.strengths (dict name -> coins held)
            - game_state.coins (tuple of (x, y), gold coin first)
            - game_state.alive (set of names)
            - game_state.turn (int)
            - game_state.max_turns (int)
        Return one of: 'none', 'north', 'south', 'east', 'west'
        """
        # STARTER LOGIC (random). Replace with your strategy!
        return random.choice(['none', 'north', 'south', 'east', 'west'])
