# ---
# jupyter:
#   jupytext:
#     formats: ipynb,py:percent
#     text_representation:
#       extension: .py
#       format_name: percent
#       format_version: '1.3'
#       jupytext_version: 1.18.1
#   kernelspec:
#     display_name: Python 3
#     language: python
#     name: python3
# ---

# %% [markdown]
# # Bubble Set Overlays
#
# This notebook draws bubble set overlays on a language-survey bubble chart:
# each language is placed by the share of respondents who **use** it and the
# share who are **interested** in it, and languages sharing an execution and
# memory model are enclosed by one smooth region.
#
# **Estimated time**: 5 minutes
#
# ## Learning Objectives
#
# - Inspect the three stages of a bubble set: spanning tree, energy field, contour
# - Redraw overlays frame by frame with `update_bubble_overlay()`
# - Tune the grid resolution, falloff radii and threshold with `BubbleSetConfig`

# %%
import matplotlib.pyplot as plt
import numpy as np

from bubbleset import BubbleSetConfig, update_bubble_overlay
from bubbleset.ops import build_energy_field, minimum_spanning_tree
from bubbleset.projection import MIN_VALUE, project_points

WIDTH, HEIGHT = 640, 480
MARGIN = {"top": 20, "right": 30, "bottom": 30, "left": 40}

# %% [markdown]
# ## Survey data and scales
#
# Two survey years. Axis scaling belongs to the chart, so we write two small
# logarithmic scales mapping `[MIN_VALUE, 1]` onto the plotting area.

# %%
survey = {
    2023: [
        ("C", 0.19, 0.06, "compiled", "manual"),
        ("C++", 0.22, 0.09, "compiled", "manual"),
        ("Rust", 0.13, 0.31, "compiled", "ownership"),
        ("Go", 0.14, 0.15, "compiled", "gc"),
        ("Java", 0.30, 0.07, "jit", "gc"),
        ("C#", 0.27, 0.08, "jit", "gc"),
        ("Python", 0.49, 0.22, "interpreted", "gc"),
        ("JavaScript", 0.63, 0.12, "interpreted", "gc"),
        ("Ruby", 0.06, 0.03, "interpreted", "gc"),
    ],
    2024: [
        ("C", 0.20, 0.05, "compiled", "manual"),
        ("C++", 0.23, 0.08, "compiled", "manual"),
        ("Rust", 0.13, 0.36, "compiled", "ownership"),
        ("Go", 0.14, 0.17, "compiled", "gc"),
        ("Java", 0.30, 0.06, "jit", "gc"),
        ("C#", 0.27, 0.07, "jit", "gc"),
        ("Python", 0.51, 0.24, "interpreted", "gc"),
        ("JavaScript", 0.62, 0.11, "interpreted", "gc"),
        ("Ruby", 0.05, 0.03, "interpreted", "gc"),
    ],
}
fields = ("language", "used", "interested", "execution_model", "memory_management")
frames = {year: [dict(zip(fields, row)) for row in rows] for year, rows in survey.items()}


def log_scale(pixel_range, domain=(MIN_VALUE, 1.0)):
    (d0, d1), (r0, r1) = np.log(domain), pixel_range
    return lambda v: r0 + (np.log(v) - d0) / (d1 - d0) * (r1 - r0)


x = log_scale((MARGIN["left"], WIDTH - MARGIN["right"]))
y = log_scale((HEIGHT - MARGIN["bottom"], MARGIN["top"]))


def group_key(d):
    return f"{d['execution_model']}-{d['memory_management']}"


# %% [markdown]
# ## Anatomy of one group
#
# The interpreted/garbage-collected group is spread across the chart. Its
# spanning tree bridges the members and deposits a thin band of energy along
# each edge.

# %%
group = [d for d in frames[2024] if group_key(d) == "interpreted-gc"]
points = project_points(group, x, y)
edges = minimum_spanning_tree(points)
field = build_energy_field(points, edges, WIDTH, HEIGHT)

fig, ax = plt.subplots(figsize=(8, 6))
ax.imshow(field, extent=(0, WIDTH, HEIGHT, 0), cmap="viridis")
ax.contour(
    np.arange(field.shape[1]) * 5 + 2.5,
    np.arange(field.shape[0]) * 5 + 2.5,
    field,
    levels=[0.5],
    colors="white",
)
for edge in edges:
    ax.plot([edge.p.x, edge.q.x], [edge.p.y, edge.q.y], color="red", lw=1)
ax.scatter(points[:, 0], points[:, 1], color="white", s=20, zorder=3)
ax.set_title(f"Energy field, {len(edges)} spanning-tree edges")

# %% [markdown]
# ## Frame-by-frame overlays
#
# `update_bubble_overlay()` clears the previous overlays and returns a
# disposer. Calling it once per year keeps exactly one region per group on
# the axes.

# %%
fig, ax = plt.subplots(figsize=(8, 6))
ax.set_xlim(0, WIDTH)
ax.set_ylim(HEIGHT, 0)

dispose = None
for year, records in frames.items():
    if dispose is not None:
        dispose()
    dispose = update_bubble_overlay(records, x, y, WIDTH, HEIGHT, ax, group_key)
    ax.set_title(f"{year}: {len(ax.patches)} overlay paths")

pts = project_points(frames[2024], x, y)
ax.scatter(pts[:, 0], pts[:, 1], color="black", s=15, zorder=3)
for (px, py), d in zip(pts, frames[2024], strict=True):
    ax.annotate(d["language"], (px, py), textcoords="offset points", xytext=(4, 4))

# %% [markdown]
# ## Tuning
#
# A larger falloff radius and a lower threshold make looser bubbles; a finer
# grid makes smoother outlines at a higher cost per frame.

# %%
loose = BubbleSetConfig(point_radius=70.0, threshold=0.35, grid_resolution=4.0)

fig, ax = plt.subplots(figsize=(8, 6))
ax.set_xlim(0, WIDTH)
ax.set_ylim(HEIGHT, 0)
update_bubble_overlay(frames[2024], x, y, WIDTH, HEIGHT, ax, group_key, config=loose)
ax.scatter(pts[:, 0], pts[:, 1], color="black", s=15, zorder=3)
ax.set_title("point_radius=70, threshold=0.35")

plt.show()
