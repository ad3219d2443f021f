"""
raymarcher - A Python Signed-Distance Ray Marcher

Renders implicit scenes built from signed-distance functions:
- Sphere, plane and cube primitives combined into scenes
- Composable translate/rotate/scale/mirror/grid transforms
- Sphere tracing with finite-difference normals
- Point lights with hard shadows
- Multi-threaded tile rendering and PNG output
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color
from .matrix import Matrix3
from .transforms import Transform, Translate, Scale, Rotate, MirrorOnPlane, Grid
from .geometry import Geometry, EstimatedDistance
from .shapes import Shape, Sphere, Plane, Cube, Scene, EmptySceneError
from .materials import Material, SolidColorMaterial, CheckerboardMaterial
from .marcher import march, estimate_normal, RayMarchHit, RayMarchMiss, RayMarchResult, DEFAULT_MAX_STEPS
from .lights import Light, PointLight
from .ray import Ray
from .camera import Camera
from .renderer import Renderer, RenderSettings, RenderCancelledError, shade
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
from .logging_config import setup_logging
