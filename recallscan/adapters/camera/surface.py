"""
Surface hit-test: where does a tap land in the world?

Without an AR session we model a single horizontal floor plane (y = 0) and a
pinhole camera held `height_m` above it, pitched by `pitch_deg` (negative =
looking down). The tap's view ray is intersected with the plane; taps at or
above the horizon, or further than `max_range_m`, miss.

World frame: camera at (0, height_m, 0), looking along -z at pitch 0, y up.
"""
import math

import numpy as np

from recallscan.orchestrator.contracts import SelectionPoint, WorldPosition


class SurfaceHitTest:
    def hit_test(self, point: SelectionPoint) -> WorldPosition | None:
        raise NotImplementedError


class PlaneHitTest(SurfaceHitTest):
    def __init__(self, height_m: float = 1.4, pitch_deg: float = -35.0,
                 hfov_deg: float = 60.0, aspect: float = 0.75, max_range_m: float = 10.0):
        self.height_m = height_m
        self.pitch = math.radians(pitch_deg)
        self.tan_h = math.tan(math.radians(hfov_deg) / 2)
        self.tan_v = self.tan_h * aspect        # aspect = height / width
        self.max_range_m = max_range_m

    def _ray(self, point: SelectionPoint) -> np.ndarray:
        u = (2.0 * point.x - 1.0) * self.tan_h
        v = (1.0 - 2.0 * point.y) * self.tan_v
        d_cam = np.array([u, v, -1.0])
        c, s = math.cos(self.pitch), math.sin(self.pitch)
        rot_x = np.array([[1.0, 0.0, 0.0],
                          [0.0, c, -s],
                          [0.0, s, c]])
        d = rot_x @ d_cam
        return d / np.linalg.norm(d)

    def hit_test(self, point: SelectionPoint) -> WorldPosition | None:
        if not (0.0 <= point.x <= 1.0 and 0.0 <= point.y <= 1.0):
            return None
        d = self._ray(point)
        if d[1] >= -1e-9:
            return None
        t = self.height_m / -d[1]
        if t > self.max_range_m:
            return None
        hit = np.array([0.0, self.height_m, 0.0]) + t * d
        return WorldPosition(x=float(hit[0]), y=0.0, z=float(hit[2]))
