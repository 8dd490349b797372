from math import inf


class Agent:
    def __init__(self, name: str):
        self.name = name

    def decide_move(self, game_state):
        # Greedy toward nearest coin; otherwise stay put
        x, y = game_state.positions[self.name]
        coins = list(game_state.coins)
        moves = ['none', 'north', 'south', 'east', 'west']
        best_mv = 'none'
        best_dist = inf
        for mv in moves:
            dx, dy = {'none': (0, 0), 'north': (0, -1), 'south': (0, 1), 'east': (1, 0), 'west': (-1, 0)}[mv]
            nx, ny = x + dx, y + dy
            # Skip moves that hit walls
            if not (0 <= nx < game_state.arena_length and 0 <= ny < game_state.arena_length):
                continue
            if not coins:
                break
            # Manhattan distance to nearest coin after this move
            d = min(abs(nx - cx) + abs(ny - cy) for (cx, cy) in coins)
            if d < best_dist:
                best_dist = d
                best_mv = mv
        return best_mv
