# ringmark

`ringmark` holds pieces of a detector for markers made of concentric circles:
edge points taken from a Canny edge map, walks along the image gradient from
one edge point to the next, ellipse geometry and hull-based growing of edge
point sets, field-line snapshots of a flow component, a bank of known ring
layouts for identification, the option parser of a detection program, and a
generator of noisy test frames.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Library overview

- `ringmark.edgepoint` — `EdgePoint` (position, gradient, `norm_gradient()`,
  `copy()`) and `EdgePointCollection`, a `width` × `height` grid of edge points
  with `add_point()`, `get()`, `contains()`, `before()`/`after()` links set by
  `link()`, and an auxiliary processed flag. `edge_points_from_canny()` adds
  every pixel equal to 255 in an edge map, in row-major order, taking its
  gradient from the `dx` and `dy` arrays (all indexed `[y, x]`).
  `received_more_vote_than()` compares two points by their `is_max` count.
- `ringmark.bresenham` — `gradient_direction_descent()` steps from an edge point
  along its gradient (scaled by a direction of +1 or -1) and returns the first
  edge point met within `nmax` steps, or `None` when it meets none or leaves
  the grid.
- `ringmark.ellipse_growing` — `Ellipse(center, a, b, angle)` with its conic
  `matrix()`, `transform()`, `scaled()` and `Ellipse.from_matrix()`; the point
  tests `is_in_ellipse`, `is_overlapping_ellipses`, `is_in_hull` and
  `is_on_the_same_side`; `compute_hull()`, which returns the inner and outer
  ellipses at a given distance; `connected_points()` and `ellipse_hull()`, which
  grow a list of edge points with 8-connected neighbours inside the hull; and
  `add_candidate_flow_to_cctag()`, which walks field lines inward and returns
  the points of each circle, or `None` when the candidate is rejected.
- `ringmark.flow_component` — `FlowComponent` keeps copies of the outer ellipse
  points, the inner arc, the seed and the field lines of a component;
  `trace_field_line()` follows the before/after links from a point and raises
  `ValueError` when the line ends too early.
- `ringmark.markers_bank` — `MarkersBank` with the built-in layouts for three
  (32 markers) and four (128 markers) crowns, `MarkersBank.from_file()` for
  custom banks, `parse_bank_line()`, and `MarkersBank.identify()`, which raises
  `IdentificationError` when nothing lies within 0.6 of the measured ratios.
- `ringmark.cmdline` — `parse_args()` reads the options `-i/--input`,
  `-n/--nbrings`, `-b/--bank`, `-p/--params` and `-o/--output` into a
  `DetectionOptions`; `format_summary()` renders them as a report.

### Identifying a marker

```python
from ringmark.markers_bank import MarkersBank, IdentificationError

bank = MarkersBank(3)
try:
    marker_id = bank.identify([2.0, 1.666667, 1.428571, 1.25, 1.111111])
except IdentificationError:
    marker_id = None
```

Identifiers start at 1, following the order of the bank.

A bank file holds one marker per line; each value is either a decimal number
or a fraction such as `29/9`.

## Command

### Generating noisy test frames

```
ringmark-simulate input.png output_dir
```

Reads a grey-scale version of `input.png` and writes 100 frames
`00000.png` … `00099.png` into `output_dir`, each median-filtered and with
block-wise and per-pixel Gaussian noise added, to mimic a compressed video
stream. The same filtering is available as `generate_compressed_frame()` in
`ringmark.simulation`.

## What the package does not do

- There is no end-to-end detection: no command or function takes an image and
  returns the markers in it. Edge maps, seeds, field-line links and ellipse
  fits must come from the caller.
- `ringmark.cmdline` only parses and reports options; it starts no detection.
- There is no marker model class, no writing or reading of detection results,
  and no tool for comparing results between two runs.