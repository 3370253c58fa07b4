import os
import sys
import logging
import numpy as np
import pandas as pd

# Add the src directory to Python path to import local grid2d
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


from grid2d import Grid2D, Grid2DConfig, from_frame, to_dense, to_sparse



def load_data() -> pd.DataFrame:
    # fake per-frame detection scores, one record per (frame, object_id)
    rng = np.random.default_rng(0)
    n = 50
    return pd.DataFrame({
        'frame': rng.integers(0, 10, n),
        'object_id': rng.integers(100, 105, n),
        'score': rng.random(n),
    })


def frame_lookup():
    df = load_data()
    grid = from_frame(df, row_col='frame', column_col='object_id', value_col='score')
    print(f"Loaded {grid.size()} entries over {len(grid.row_keys())} frames and {len(grid.column_keys())} objects")

    # per-object view across every frame
    for object_id in sorted(grid.column_keys()):
        scores = grid.column_view(object_id)
        print(f"  object {object_id}: seen in {len(scores)} frames, best score {max(scores.values()):.3f}")

    # bucket frames into segments of 5, keeping the first score seen per segment
    segments = Grid2D(data_store=grid.row_map_view(), config=Grid2DConfig(on_collision='first'))
    segments = segments.copy_with_conversion(lambda frame: frame // 5, lambda object_id: object_id, lambda s: round(s, 3))
    print(to_dense(segments, fill_value=0.0))

    matrix, frames, objects = to_sparse(grid)
    print(f"Sparse matrix shape {matrix.shape}, nnz {matrix.nnz}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    frame_lookup()
