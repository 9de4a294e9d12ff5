from .errors import (
    DevizeError,
    ExtensionError,
    ImplementationContractError,
    PropertyValidationError,
    RecursionGuardError,
    SpecShapeError,
    UnknownTypeError,
)
from .config import EngineConfig, get_engine_config, set_engine_config
from .types import Computed, PropertySchema, Static, TypeDefinition
from .registry import Registry
from .context import (
    EngineContext,
    create_context,
    get_context,
    get_data,
    get_registry,
    register_data,
    reset_context,
    set_context,
)
from .renderable import EmptyRenderable, Renderable, RenderedResult, Visualization
from .builder import build_viz, resolve, update_viz
from .define import define
from .render import render_viz
from .canvas import Canvas, RecordingContext
from .svg import create_svg_root, to_svg_string
from .solver import (
    Constraint,
    ConstraintKind,
    ConstraintSolver,
    SolveOptions,
    SolveReport,
    Variable,
    box_layout_constraints,
    solve_layout,
)

__all__ = [
    'DevizeError',
    'ExtensionError',
    'ImplementationContractError',
    'PropertyValidationError',
    'RecursionGuardError',
    'SpecShapeError',
    'UnknownTypeError',
    'EngineConfig',
    'get_engine_config',
    'set_engine_config',
    'Computed',
    'PropertySchema',
    'Static',
    'TypeDefinition',
    'Registry',
    'EngineContext',
    'create_context',
    'get_context',
    'get_data',
    'get_registry',
    'register_data',
    'reset_context',
    'set_context',
    'EmptyRenderable',
    'Renderable',
    'RenderedResult',
    'Visualization',
    'build_viz',
    'resolve',
    'update_viz',
    'define',
    'render_viz',
    'Canvas',
    'RecordingContext',
    'create_svg_root',
    'to_svg_string',
    'Constraint',
    'ConstraintKind',
    'ConstraintSolver',
    'SolveOptions',
    'SolveReport',
    'Variable',
    'box_layout_constraints',
    'solve_layout',
]
