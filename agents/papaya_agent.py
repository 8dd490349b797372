from botbrain import SelfData, step

# Adapter between the arena snapshot and the stateless per-tick brain.
# No state is kept between turns.


class Agent:
    def __init__(self, name: str):
        self.name = name

    def decide_move(self, game_state) -> str:
        """
        Translate the GameState snapshot into the brain's tick input.
        Accessible fields used:
            - game_state.arena_length (int)
            - game_state.positions (dict name -> (x, y))
            - game_state.strengths (dict name -> coins held)
            - game_state.coins (tuple of (x, y), gold first)
            - game_state.alive (set of names)
        Return one of: 'none', 'north', 'south', 'east', 'west'
        """
        x, y = game_state.positions[self.name]
        me = SelfData(
            coins=game_state.strengths[self.name],
            location_x=x,
            location_y=y,
            arena_length=game_state.arena_length,
        )
        others = [
            (game_state.strengths[name], ox, oy)
            for name, (ox, oy) in sorted(game_state.positions.items())
            if name != self.name and name in game_state.alive
        ]
        return step(me, others, list(game_state.coins))
