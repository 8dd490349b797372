import random


class Agent:
    def __init__(self, name: str):
        self.name = name

    def decide_move(self, game_state):
        # Wander, but never off the board
        x, y = game_state.positions[self.name]
        moves = ['none', 'north', 'south', 'east', 'west']
        good = []
        for mv in moves:
            dx, dy = {'none': (0, 0), 'north': (0, -1), 'south': (0, 1), 'east': (1, 0), 'west': (-1, 0)}[mv]
            nx, ny = x + dx, y + dy
            if 0 <= nx < game_state.arena_length and 0 <= ny < game_state.arena_length:
                good.append(mv)
        return random.choice(good)
