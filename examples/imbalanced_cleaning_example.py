"""
Example: deduplicate, oversample and clean an imbalanced dataset.

The rows are pushed through the batch protocol by hand for the first filter,
then the remaining filters are chained with a FilterPipeline.
"""
import logging

import numpy as np
import pandas as pd

from instance_filters import (
    Dataset,
    DuplicatePartitioner,
    EditedNearestNeighbours,
    FilterPipeline,
    RandomOverSampler,
)

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

# Create an imbalanced dataset with a few repeated rows and some label noise
rng = np.random.RandomState(42)
n_major, n_minor = 180, 20
df = pd.DataFrame({
    'feature_1': np.concatenate([rng.normal(0, 1, n_major), rng.normal(3, 1, n_minor)]).round(1),
    'feature_2': np.concatenate([rng.normal(0, 1, n_major), rng.normal(3, 1, n_minor)]).round(1),
    'segment': rng.choice(['retail', 'online'], n_major + n_minor),
    'target': ['negative'] * n_major + ['positive'] * n_minor,
})
df = pd.concat([df, df.iloc[:5]], ignore_index=True)
df.loc[rng.choice(n_major, 5, replace=False), 'target'] = 'positive'

data = Dataset.from_frame(df, class_column='target')
print("Original class distribution:")
print(data.class_distribution())

# Drive one filter through the batch protocol explicitly
dedup = DuplicatePartitioner()
dedup.set_input_format(data.schema)
for row in data:
    dedup.input(row)
dedup.batch_finished()

unique = data.empty_like()
row = dedup.poll_output()
while row is not None:
    unique.add(row)
    row = dedup.poll_output()
print(f"\nRemoved {len(data) - len(unique)} duplicated rows")

# Chain the rebalancing and cleaning steps
pipeline = FilterPipeline([
    ('oversample', RandomOverSampler(percentage=30, random_state=42)),
    ('clean', EditedNearestNeighbours(k=3)),
])
result = pipeline.apply(unique)

print("\nPipeline summary:")
print(pipeline.step_summary)
print("\nFinal class distribution:")
print(result.class_distribution())
