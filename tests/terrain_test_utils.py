from collections import deque

from burrow.terrain.grid import Grid
from burrow.terrain.tiles import is_solid


def as_grid(grid_or_snapshot):
    """Accept a Grid, GridSnapshot or Terrain and return a mutable Grid copy."""
    grid = getattr(grid_or_snapshot, "grid", grid_or_snapshot)
    if isinstance(grid, Grid):
        return grid.copy()
    return grid.thaw()


def passable_tiles(grid_or_snapshot):
    g = as_grid(grid_or_snapshot)
    return {(x, y) for x, y in g.cells() if not is_solid(g.get(x, y))}


def bfs_reachable(grid_or_snapshot, start):
    """Return set of (x,y) non-solid tiles reachable from start with 4-way moves."""
    g = as_grid(grid_or_snapshot)
    if start is None:
        return set()
    sx, sy = start
    if not g.in_bounds(sx, sy) or is_solid(g.get(sx, sy)):
        return set()
    q = deque([start])
    vis = {start}
    while q:
        x, y = q.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if g.in_bounds(nx, ny) and (nx, ny) not in vis and not is_solid(g.get(nx, ny)):
                vis.add((nx, ny))
                q.append((nx, ny))
    return vis


def border_coords(width, height):
    for x in range(width):
        yield x, 0
        yield x, height - 1
    for y in range(1, height - 1):
        yield 0, y
        yield width - 1, y


def room(width, height, wall="#", floor="."):
    """Glyph rows for a single open room enclosed by a one-tile wall."""
    rows = [wall * width]
    rows += [wall + floor * (width - 2) + wall for _ in range(height - 2)]
    rows.append(wall * width)
    return rows
