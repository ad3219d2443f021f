"""
Scene description language parser.

Supports a YAML-based scene description format with:
- Camera configuration
- Render settings
- Materials library
- Objects (shapes and nested scenes, each with a transform list)
- Lights

Example scene file:
```yaml
camera:
  origin: [0, 0, -5]
  upper_left: [-4, 2.25, 5]
  lower_right: [4, -2.25, 5]

render:
  width: 800
  height: 450
  hit_distance: 0.01

materials:
  floor:
    type: checkerboard
    color1: [0.8, 0.8, 0.8]
    color2: [0.4, 0.4, 0.4]
  red:
    type: solid
    color: [1, 0.2, 0.2]

objects:
  - type: plane
    normal: [0, 1, 0]
    material: floor
    transforms:
      - translate: [0, -0.3, 0]

  - type: scene
    transforms:
      - rotate_y: 0.5
    children:
      - type: sphere
        radius: 0.5
        material: red
        transforms:
          - translate: [1.1, 0, 0]

lights:
  - type: point
    position: [-2, 2.7, -1.8]
    min_distance: 7
    max_distance: 8
    intensity: 0.35
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple
import json
import logging

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .geometry import Geometry
from .shapes import Sphere, Plane, Cube, Scene, EmptySceneError
from .materials import Material, SolidColorMaterial, CheckerboardMaterial
from .lights import Light, PointLight
from .marcher import DEFAULT_MAX_STEPS
from .renderer import RenderSettings

logger = logging.getLogger(__name__)


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.geometry: Optional[Geometry] = None
        self.lights: List[Light] = []
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: str) -> Tuple[Geometry, List[Light], Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (geometry, lights, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()
        logger.info("Loading scene from %s", path)

        if path.suffix == '.json':
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                raise SceneParseError(f"Invalid JSON in {filepath}: {e}") from e
        else:
            import yaml
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise SceneParseError(f"Invalid YAML in {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Geometry, List[Light], Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (geometry, lights, camera, settings)
        """
        data = self._require_mapping(data, "Scene description")

        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        self.geometry = self._parse_children(data.get('objects') or [])

        if 'lights' in data:
            self._parse_lights(data['lights'])

        if 'render' in data:
            self._parse_settings(data['render'])
        else:
            self.settings = RenderSettings()

        if 'camera' in data:
            self._parse_camera(data['camera'])
        else:
            self.camera = Camera.from_frustum(
                origin=Point3(0, 0, -5),
                upper_left=Point3(-4, 2.25, 5),
                lower_right=Point3(4, -2.25, 5)
            )

        logger.info("Parsed scene with %d top-level objects and %d lights",
                    len(self.geometry), len(self.lights))
        return self.geometry, self.lights, self.camera, self.settings

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Vec3(
                float(data.get('x', 0)),
                float(data.get('y', 0)),
                float(data.get('z', 0))
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from various formats."""
        if isinstance(data, (int, float)):
            return Color.gray(float(data))
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Color(
                float(data.get('r', 0)),
                float(data.get('g', 0)),
                float(data.get('b', 0))
            )
        elif isinstance(data, str):
            # Handle hex colors
            if data.startswith('#'):
                hex_color = data[1:]
                if len(hex_color) == 6:
                    r = int(hex_color[0:2], 16) / 255.0
                    g = int(hex_color[2:4], 16) / 255.0
                    b = int(hex_color[4:6], 16) / 255.0
                    return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _require_mapping(self, data: Any, what: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise SceneParseError(f"{what} must be a mapping, got {type(data).__name__}: {data!r}")
        return data

    def _require_list(self, data: Any, what: str) -> List[Any]:
        if not isinstance(data, list):
            raise SceneParseError(f"{what} must be a list, got {type(data).__name__}: {data!r}")
        return data

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        materials_data = self._require_mapping(materials_data, "materials section")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._create_material(mat_data)

    def _create_material(self, mat_data: Dict[str, Any]) -> Material:
        mat_data = self._require_mapping(mat_data, "Material")
        mat_type = str(mat_data.get('type', 'solid')).lower()

        if mat_type == 'solid':
            return SolidColorMaterial(self._parse_color(mat_data.get('color', 1.0)))
        elif mat_type == 'checkerboard':
            try:
                scale = float(mat_data.get('scale', 1.0))
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Invalid checkerboard scale: {e}") from e
            return CheckerboardMaterial(
                self._parse_color(mat_data.get('color1', 0.8)),
                self._parse_color(mat_data.get('color2', 0.4)),
                scale
            )
        else:
            raise SceneParseError(f"Unknown material type: {mat_type}")

    def _get_material(self, obj_data: Dict[str, Any]) -> Material:
        """Resolve an object's material by name or inline definition."""
        mat_ref = obj_data.get('material')
        if mat_ref is None:
            return SolidColorMaterial.gray(0.5)
        if isinstance(mat_ref, dict):
            return self._create_material(mat_ref)
        if mat_ref not in self.materials:
            raise SceneParseError(f"Unknown material: {mat_ref}")
        return self.materials[mat_ref]

    def _parse_children(self, objects_data: List[Dict[str, Any]]) -> Scene:
        objects_data = self._require_list(objects_data, "Object list")
        try:
            return Scene(self._parse_object(obj) for obj in objects_data)
        except EmptySceneError as e:
            raise SceneParseError("Scene must contain at least one object") from e

    def _parse_object(self, obj_data: Dict[str, Any]) -> Geometry:
        """Parse one object and apply its transform list."""
        obj_data = self._require_mapping(obj_data, "Object")
        obj_type = str(obj_data.get('type', '')).lower()

        try:
            if obj_type == 'sphere':
                geometry = Sphere(float(obj_data.get('radius', 1.0)), self._get_material(obj_data))
            elif obj_type == 'plane':
                normal = self._parse_vec3(obj_data.get('normal', [0, 1, 0]))
                geometry = Plane(normal, self._get_material(obj_data))
            elif obj_type == 'cube':
                geometry = Cube(float(obj_data.get('side', 1.0)), self._get_material(obj_data))
            elif obj_type == 'scene':
                geometry = self._parse_children(obj_data.get('children') or [])
            else:
                raise SceneParseError(f"Unknown object type: {obj_type}")
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid {obj_type}: {e}") from e

        transforms = self._require_list(obj_data.get('transforms') or [], "Transform list")
        for transform_data in transforms:
            geometry = self._apply_transform(geometry, transform_data)
        return geometry

    def _apply_transform(self, geometry: Geometry, transform_data: Dict[str, Any]) -> Geometry:
        """Apply a single-key transform mapping such as {translate: [0, 1, 0]}."""
        if not isinstance(transform_data, dict) or len(transform_data) != 1:
            raise SceneParseError(f"Transform must be a single-key mapping: {transform_data}")
        (kind, value), = transform_data.items()

        try:
            if kind == 'translate':
                return geometry.translate(self._parse_vec3(value))
            elif kind == 'scale':
                return geometry.scale(float(value))
            elif kind == 'rotate_x':
                return geometry.rotate_x(float(value))
            elif kind == 'rotate_y':
                return geometry.rotate_y(float(value))
            elif kind == 'rotate_z':
                return geometry.rotate_z(float(value))
            elif kind == 'mirror':
                return geometry.mirror_on_plane(
                    self._parse_vec3(value.get('origin', [0, 0, 0])),
                    self._parse_vec3(value['normal'])
                )
            elif kind == 'grid':
                size = value if isinstance(value, (int, float)) else self._parse_vec3(value)
                return geometry.grid(size)
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise SceneParseError(f"Invalid {kind} transform {value!r}: {e}") from e
        raise SceneParseError(f"Unknown transform: {kind}")

    def _parse_lights(self, lights_data: List[Dict[str, Any]]) -> None:
        """Parse lights section."""
        for light_data in self._require_list(lights_data, "lights section"):
            light_data = self._require_mapping(light_data, "Light")
            light_type = str(light_data.get('type', 'point')).lower()
            if light_type != 'point':
                raise SceneParseError(f"Unknown light type: {light_type}")
            try:
                self.lights.append(PointLight(
                    position=self._parse_vec3(light_data.get('position', [0, 5, 0])),
                    min_distance=float(light_data.get('min_distance', 0.0)),
                    max_distance=float(light_data.get('max_distance', 10.0)),
                    intensity=float(light_data.get('intensity', 1.0))
                ))
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Invalid point light: {e}") from e

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        camera_data = self._require_mapping(camera_data, "camera section")
        try:
            self._build_camera(camera_data)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid camera: {e}") from e

    def _build_camera(self, camera_data: Dict[str, Any]) -> None:
        if 'look_from' in camera_data:
            self.camera = Camera.from_look_at(
                look_from=self._parse_vec3(camera_data['look_from']),
                look_at=self._parse_vec3(camera_data.get('look_at', [0, 0, 0])),
                vup=self._parse_vec3(camera_data.get('vup', [0, 1, 0])),
                vfov=float(camera_data.get('vfov', 90)),
                aspect_ratio=self.settings.width / self.settings.height,
                focus_dist=float(camera_data.get('focus_dist', 10.0))
            )
        else:
            self.camera = Camera.from_frustum(
                origin=self._parse_vec3(camera_data.get('origin', [0, 0, -5])),
                upper_left=self._parse_vec3(camera_data.get('upper_left', [-4, 2.25, 5])),
                lower_right=self._parse_vec3(camera_data.get('lower_right', [4, -2.25, 5]))
            )

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        settings_data = self._require_mapping(settings_data, "render section")
        try:
            self.settings = RenderSettings(
                width=int(settings_data.get('width', 800)),
                height=int(settings_data.get('height', 450)),
                hit_distance=float(settings_data.get('hit_distance', 0.01)),
                max_steps=int(settings_data.get('max_steps', DEFAULT_MAX_STEPS)),
                diffuse_intensity=float(settings_data.get('diffuse_intensity', 0.15)),
                tile_size=int(settings_data.get('tile_size', 32)),
                num_threads=int(settings_data.get('threads', 0)),
                background_color=self._parse_color(settings_data.get('background', 0.0)),
                gamma=float(settings_data.get('gamma', 1.0))
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: str) -> Tuple[Geometry, List[Light], Camera, RenderSettings]:
    """Load a scene from file.

    Args:
        filepath: Path to scene file

    Returns:
        Tuple of (geometry, lights, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[Geometry, List[Light], Camera, RenderSettings]:
    """Parse a scene from dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        Tuple of (geometry, lights, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_dict(data)
