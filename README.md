# saigeassoc

Building blocks for single-variant and region-based (burden) genetic
association testing on dosage data. The package is built on numpy and scipy.

## Installation

```
pip install .
pip install ".[test]"   # with the test dependencies
```

## Modules

### `saigeassoc.settings`

- `AssocSettings` holds the run-wide cut-offs: impute method (`"mean"` or
  `"minor"`), missing rate, minimum MAF/MAC/info, dosage zeroing, beta weight
  shape parameters, MAC cut-off for exact tests, and optional male sample
  indices and X PAR regions. It also holds the output prefix.
  - `passes_marker_qc(missing_rate, maf, mac, impute_info)` applies the
    marker quality control.
  - `single_in_group_path()` and `single_in_group_temp_path()` give the paths
    of the per-variant result files that region tests write.
  - `rewrite_x_nonpar_for_males` is true when male indices are set.
- `RegionSettings` holds the MAF cut-offs of a region test, the chunk size in
  markers, and the MAC limits.
  - `max_maf_limit()` gives the largest MAF cut-off.
  - `is_ultra_rare(mac)` is true when a variant is to be collapsed as
    ultra-rare.
- `MarkerSettings` holds the options of single-marker tests: extra output
  details and the chunk size used for progress reports.

Every settings class checks its values when it is created and raises
`ValueError` on bad input.

### `saigeassoc.genotype`

- `is_in_par(position, par_regions)` tells whether a position lies in a
  pseudo-autosomal region. The bounds count as inside.
- `process_male_x_nonpar(genotypes, position, par_regions, male_indices)`
  returns a copy of the dosages. Outside every PAR region, the male dosages
  are doubled.
- `genotype_class_counts(dosages, flipped)` gives the homozygous and
  heterozygous counts.
- `case_control_summary(genotypes, case_indices, ctrl_indices, flipped)`
  returns a `CaseControlSummary` with allele frequencies, sample counts,
  allele counts and genotype classes for cases and controls.
- `beta_weight(maf, weights_beta)` gives the beta-density weight of a
  variant.
- `format_max_maf(value)` renders a MAF cut-off label such as `0.01`.

### `saigeassoc.regiongroups`

- `maf_indicator(max_mafs, maf)` and `group_indices(annotation_row, max_mafs,
  maf)` find the annotation × max-MAF groups a variant belongs to. The group
  index is `annotation * n_mafs + maf_index`.
- `RegionAccumulator` collects the sums of each group.
  - `add_common(...)` adds a variant that is not ultra-rare: its weighted
    genotype sums, its MAC (and its case/control MAC, if given) and a count of
    rare variants.
  - `add_ultra_rare(...)` collapses an ultra-rare variant into one
    pseudo-marker per group. It keeps the sample-wise maximum dosage, weighted
    when a custom weight is given.
  - `max_maf_index_per_annotation()` gives, for each annotation, the smallest
    MAF cut-off that covers all of its variants.

### `saigeassoc.firth`

`fast_logistf_fit(x, y, weight, offset, firth, init, maxit, maxstep, gconv,
xconv)` fits a logistic regression by Newton-Raphson, with Firth's bias
correction when `firth` is true. Each step is capped at `maxstep` per
coefficient. It returns a `LogisticFitResult` with `beta`, `converged` and
`iterations`. The fit stops unconverged when the Fisher information is not
positive definite.

### `saigeassoc.varmat`

- `ChunkStore(prefix)` keeps the chunks of a region's P1 (markers × samples)
  and P2 (samples × markers) matrices on disk, in numpy `.npy` format. Use
  `save(index, p1, p2)`, `load(index)` and `remove(count)`.
- `assemble_variance_matrix(store, chunk_sizes)` builds the full variance
  matrix block by block from the stored chunks.
- `conditional_weights(weight_cond, maf_cond, weights_beta)` and
  `weighted_conditional_varmat(var_mat_cond, weights)` weight the conditioning
  markers.

### `saigeassoc.output`

- `SingleVariantResult` and `BurdenResult` are the rows of the result tables.
  Rows whose p-value is `None` or `"NA"` count as untested and are skipped.
- `single_header(...)`, `format_single_row(...)` and
  `write_single_results(...)` produce the tab-separated single-variant table.
  The columns depend on the trait type (`"binary"`, `"survival"` or
  `"quantitative"`), imputation info, conditioning and extra output.
  `write_single_results` returns the number of rows written and the number of
  ultra-rare rows among them.
- `burden_header(...)` and `write_burden_results(...)` write the region
  table. It ends with a Cauchy-combined line for the region.
- `format_value(value)` renders numbers with six significant digits,
  booleans as `true`/`false` and `None` as `NA`.
- `copy_lines(source_path, stream)` appends a file's lines to a stream.

## Example

```python
import numpy as np
from saigeassoc.firth import fast_logistf_fit

x = np.column_stack([np.ones(6), [0, 1, 0, 1, 1, 0]])
y = np.array([0, 1, 0, 1, 0, 1], dtype=float)
fit = fast_logistf_fit(x, y, np.ones(6), np.zeros(6), True,
                       np.zeros(2), 25, 5, 1e-5, 1e-5)
print(fit.beta, fit.converged)
```

```python
import io
from saigeassoc.output import single_header

stream = io.StringIO()
stream.write(single_header("quantitative", False, False, False))
```

## What the package does not do

- It does not read genotype files of any format. The caller supplies the
  dosages as arrays.
- It does not fit null models, compute score-test or saddlepoint p-values,
  or combine p-values. Betas, standard errors and p-values reach the output
  functions ready-made.
- It has no command-line program. It is a library for building such a
  pipeline.