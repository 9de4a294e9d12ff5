import xml.etree.ElementTree as ET

import pytest

from devize import (
    Canvas,
    EmptyRenderable,
    ImplementationContractError,
    RecordingContext,
    Renderable,
    define,
    render_viz,
    resolve,
)
from devize.svg import create_svg_root, local_name, to_svg_string


def children_tags(element):
    return [local_name(child.tag) for child in element]


def test_render_to_svg_root_and_cleanup(context):
    svg = create_svg_root(200, 100)

    handle = render_viz({'type': 'rect', 'width': 10, 'height': 20}, svg)

    assert children_tags(svg) == ['rect']
    assert handle.element is svg[0]
    assert handle.element.get('fill') == 'black'

    handle.cleanup()
    assert list(svg) == []


def test_render_into_html_like_element_creates_svg(context):
    div = ET.Element('div')

    render_viz({'type': 'circle', 'r': 5}, div)
    render_viz({'type': 'circle', 'r': 7}, div)

    assert children_tags(div) == ['svg']
    svg = div[0]
    assert svg.get('width') == '100%'
    assert svg.get('height') == '100%'
    assert [child.get('r') for child in svg] == ['5', '7']


def test_render_update_replaces_in_place(context):
    svg = create_svg_root()
    render_viz({'type': 'line', 'x2': 10}, svg)
    handle = render_viz({'type': 'rect', 'width': 10, 'height': 20}, svg)
    render_viz({'type': 'circle', 'r': 3}, svg)

    updated = handle.update({'fill': 'red'})

    assert children_tags(svg) == ['line', 'rect', 'circle']
    assert svg[1] is updated.element
    assert svg[1].get('fill') == 'red'


def test_render_to_canvas(context):
    canvas = Canvas(320, 240)

    handle = render_viz({'type': 'rect', 'x': 1, 'y': 2, 'width': 10, 'height': 20}, canvas)
    ctx = canvas.get_context('2d')

    assert ctx.operations[0] == ('clear_rect', 0, 0, 320.0, 240.0)
    assert ('rect', 1, 2, 10, 20) in ctx.operations
    assert ('fill', 'black', 1.0) in ctx.operations
    assert handle.element is canvas

    handle.cleanup()
    assert ctx.operations[-1] == ('clear_rect', 0, 0, 320.0, 240.0)


def test_render_to_bare_2d_context(context):
    ctx = RecordingContext()

    render_viz({'type': 'circle', 'cx': 4, 'cy': 4, 'r': 2}, ctx)

    assert ctx.op_names()[:2] == ['clear_rect', 'save']
    assert 'arc' in ctx.op_names()


def test_canvas_update_redraws(context):
    canvas = Canvas()
    handle = render_viz({'type': 'rect', 'width': 10, 'height': 20}, canvas)
    ctx = canvas.get_context('2d')
    ctx.reset()

    handle.update({'fill': 'green'})

    assert ctx.op_names()[0] == 'clear_rect'
    assert ('fill', 'green', 1.0) in ctx.operations


def test_render_passes_container_to_layout(context):
    sizes = []
    define(
        {
            'name': 'panel',
            'properties': {},
            'implementation': lambda props: {
                'type': 'rect',
                'width': props['layout']['width'],
                'height': props['layout']['height'],
            },
            'generate_constraints': lambda props, ctx: sizes.append(ctx['container']) or [{'type': 'fitToContainer'}],
        }
    )
    svg = create_svg_root(300, 120)

    handle = render_viz({'type': 'panel'}, svg)

    assert sizes == [svg]
    assert handle.element.get('width') == '300'
    assert handle.element.get('height') == '120'


def test_renderable_instances_render_directly(context):
    svg = create_svg_root()

    handle = render_viz(EmptyRenderable(), svg)

    assert children_tags(svg) == ['g']
    with pytest.raises(ImplementationContractError):
        handle.update({'x': 1})


def test_renderable_missing_backend_is_rejected(context):
    class SvgOnly(Renderable):
        def render_to_svg(self, svg):
            return svg

    with pytest.raises(ImplementationContractError) as exc:
        render_viz(SvgOnly(), create_svg_root())

    assert 'render_to_canvas' in str(exc.value)


def test_unsupported_target(context):
    with pytest.raises(TypeError) as exc:
        render_viz({'type': 'rect', 'width': 1, 'height': 1}, object())

    assert 'Unsupported render target' in str(exc.value)


def test_renderable_render_method(context):
    viz = resolve({'type': 'text', 'text': 'hello', 'x': 3, 'y': 9})
    svg = create_svg_root()

    viz.render(svg)

    assert 'hello</text>' in to_svg_string(svg)


def test_nested_child_layout_sees_render_container(context):
    seen = []

    def fit(props):
        seen.append((props['layout']['width'], props['layout']['height']))
        return {'type': 'rect', 'width': props['layout']['width'], 'height': props['layout']['height']}

    define(
        {
            'name': 'fit',
            'implementation': fit,
            'generate_constraints': lambda props, ctx: [{'type': 'fitToContainer'}],
        }
    )
    svg = create_svg_root(300, 200)

    handle = render_viz({'type': 'group', 'children': [{'type': 'fit'}]}, svg)

    assert seen == [(300.0, 200.0)]
    assert handle.element[0].get('width') == '300'
    assert handle.element[0].get('height') == '200'
