import pytest

from devize import (
    Computed,
    EmptyRenderable,
    EngineConfig,
    ImplementationContractError,
    PropertyValidationError,
    RecursionGuardError,
    Renderable,
    SpecShapeError,
    UnknownTypeError,
    Visualization,
    define,
    register_data,
    resolve,
    set_engine_config,
    update_viz,
)
from devize.svg import create_svg_root


def define_leaf(name='leaf', properties=None):
    define(
        {
            'name': name,
            'properties': properties or {},
            'implementation': lambda props: EmptyRenderable(props),
        }
    )


def test_renderables_are_returned_unchanged(bare_context):
    leaf = EmptyRenderable()

    assert resolve(leaf) is leaf
    assert resolve(resolve(leaf)) is leaf


@pytest.mark.parametrize(
    'spec, message',
    [
        (None, 'cannot be None'),
        ([1, 2], 'must be a mapping'),
        ({}, 'must have a type'),
        ({'type': ''}, 'must have a type'),
        ({'type': 3}, 'must have a type'),
    ],
)
def test_malformed_specs_are_rejected(bare_context, spec, message):
    with pytest.raises(SpecShapeError) as exc:
        resolve(spec)

    assert message in str(exc.value)


def test_unknown_type(bare_context):
    with pytest.raises(UnknownTypeError) as exc:
        resolve({'type': 'sparkline'})

    assert str(exc.value) == 'Unknown visualization type: sparkline'
    assert exc.value.type_name == 'sparkline'


def test_caller_spec_is_not_mutated(bare_context):
    define_leaf(properties={'color': {'default': 'black'}})
    spec = {'type': 'leaf'}

    viz = resolve(spec)

    assert spec == {'type': 'leaf'}
    assert viz.get_property('color') == 'black'


def test_default_non_clobber(bare_context):
    define_leaf(properties={'color': {'default': 'black'}})

    viz = resolve({'type': 'leaf', 'color': 'red'})

    assert viz.get_property('color') == 'red'


def test_required_enforced_before_implementation(bare_context):
    calls = []
    define(
        {
            'name': 'bar',
            'properties': {'data': {'required': True, 'type': 'array'}},
            'implementation': lambda props: calls.append(props) or EmptyRenderable(),
        }
    )

    with pytest.raises(PropertyValidationError) as exc:
        resolve({'type': 'bar'})

    assert "Required property 'data' is missing" in str(exc.value)
    assert calls == []


def test_decomposition_chain_is_resolved(bare_context):
    define_leaf()
    define({'name': 'middle', 'properties': {}, 'implementation': lambda props: {'type': 'leaf'}})
    define({'name': 'top', 'properties': {}, 'implementation': lambda props: {'type': 'middle'}})

    viz = resolve({'type': 'top'})

    assert isinstance(viz, Visualization)
    assert viz.renderable_type == 'top'
    assert viz.leaf.renderable_type == 'middle'
    assert isinstance(viz.terminal, EmptyRenderable)


def test_self_loop_is_guarded(bare_context):
    define({'name': 'selfish', 'properties': {}, 'implementation': lambda props: {'type': 'selfish'}})

    with pytest.raises(RecursionGuardError) as exc:
        resolve({'type': 'selfish'})

    assert 'infinite loop' in str(exc.value)


def test_indirect_loop_is_guarded(bare_context):
    define({'name': 'a', 'properties': {}, 'implementation': lambda props: {'type': 'b'}})
    define({'name': 'b', 'properties': {}, 'implementation': lambda props: {'type': 'a'}})

    with pytest.raises(RecursionGuardError) as exc:
        resolve({'type': 'a'})

    assert exc.value.chain == ('a', 'b', 'a')
    assert 'a -> b -> a' in str(exc.value)


def test_depth_limit(bare_context):
    set_engine_config(EngineConfig(max_depth=3))
    define_leaf()
    for idx in range(5):
        target = 'leaf' if idx == 0 else f'level{idx - 1}'
        define({'name': f'level{idx}', 'properties': {}, 'implementation': lambda props, t=target: {'type': t}})

    resolve({'type': 'level1'})
    with pytest.raises(RecursionGuardError) as exc:
        resolve({'type': 'level4'})

    assert 'maximum depth of 3' in str(exc.value)


def test_implementation_must_return_spec_or_renderable(bare_context):
    define({'name': 'broken', 'properties': {}, 'implementation': lambda props: 42})

    with pytest.raises(ImplementationContractError) as exc:
        resolve({'type': 'broken'})

    assert "Implementation of 'broken' returned int" in str(exc.value)


def test_renderable_without_backends_is_rejected(bare_context):
    define({'name': 'hollow', 'properties': {}, 'implementation': lambda props: Renderable(props)})

    with pytest.raises(ImplementationContractError) as exc:
        resolve({'type': 'hollow'})

    assert 'render_to_svg and render_to_canvas' in str(exc.value)


def test_idempotent_resolution(bare_context):
    define_leaf(properties={'size': {'default': 2}})
    define({'name': 'wrapper', 'properties': {}, 'implementation': lambda props: {'type': 'leaf', 'size': 5}})
    spec = {'type': 'wrapper'}

    first = resolve(spec)
    second = resolve(spec)

    assert resolve(first) is first
    assert first.leaf.props == second.leaf.props
    assert first.leaf.get_property('size') == 5


def test_computed_property_sees_earlier_values(bare_context):
    define_leaf(properties={'width': {'type': 'number'}, 'area': {'type': 'number'}})

    viz = resolve({'type': 'leaf', 'width': 4, 'area': Computed(lambda props: props['width'] ** 2)})

    assert viz.get_property('area') == 16


def test_registered_data_reference(bare_context):
    define_leaf(properties={'data': {'type': 'array', 'required': True}})
    register_data('sales', [1, 2, 3])

    viz = resolve({'type': 'leaf', 'data': '@sales'})

    assert viz.get_property('data') == [1, 2, 3]


def test_unknown_data_reference(bare_context):
    define_leaf(properties={'data': {'type': 'array'}})

    with pytest.raises(PropertyValidationError) as exc:
        resolve({'type': 'leaf', 'data': '@nothing'})

    assert "Data 'nothing'" in str(exc.value)


def test_update_re_resolves_merged_spec(bare_context):
    define_leaf(properties={'color': {'default': 'black'}, 'size': {'default': 1}})

    viz = resolve({'type': 'leaf', 'size': 3})
    updated = update_viz(viz, {'color': 'blue'})

    assert updated is not viz
    assert updated.get_property('color') == 'blue'
    assert updated.get_property('size') == 3
    assert viz.get_property('color') == 'black'


def test_layout_from_fit_to_container(bare_context):
    seen = {}

    def implementation(props):
        seen.update(props['layout'])
        return EmptyRenderable()

    define(
        {
            'name': 'chart',
            'properties': {},
            'implementation': implementation,
            'generate_constraints': lambda props, ctx: [{'type': 'fitToContainer'}],
        }
    )

    resolve({'type': 'chart'})
    assert seen == {'width': 800.0, 'height': 400.0}

    resolve({'type': 'chart'}, container=create_svg_root(300, 150))
    assert seen == {'width': 300.0, 'height': 150.0}


def test_caller_layout_is_kept(bare_context):
    seen = {}
    define(
        {
            'name': 'chart',
            'properties': {},
            'implementation': lambda props: seen.update(props['layout']) or EmptyRenderable(),
            'generate_constraints': lambda props, ctx: [{'type': 'fitToContainer'}],
        }
    )

    resolve({'type': 'chart', 'layout': {'width': 10, 'height': 20}})

    assert seen == {'width': 10, 'height': 20}


def test_define_without_properties_loops_at_resolve(bare_context):
    define({'name': 'loop', 'implementation': lambda props: {'type': 'loop'}})

    assert bare_context.registry.get('loop').properties == {}
    with pytest.raises(RecursionGuardError) as exc:
        resolve({'type': 'loop'})

    assert 'infinite loop' in str(exc.value)


def test_type_nesting_itself_through_children_is_guarded(context):
    set_engine_config(EngineConfig(max_depth=16))
    define({'name': 'nest', 'implementation': lambda props: {'type': 'group', 'children': [{'type': 'nest'}]}})

    with pytest.raises(RecursionGuardError) as exc:
        resolve({'type': 'nest'})

    assert 'maximum depth of 16' in str(exc.value)
    assert exc.value.chain[:4] == ('nest', 'group', 'nest', 'group')


def test_children_count_towards_max_depth(context):
    set_engine_config(EngineConfig(max_depth=3))
    deep = {'type': 'group', 'children': [{'type': 'group', 'children': [{'type': 'group', 'children': ['x']}]}]}

    with pytest.raises(RecursionGuardError):
        resolve(deep)


def test_children_may_repeat_ancestor_types(context):
    define(
        {
            'name': 'badge',
            'properties': {'label': {'type': 'string', 'default': ''}},
            'implementation': lambda props: {'type': 'group', 'children': [props['label']]},
        }
    )

    viz = resolve({'type': 'group', 'children': [{'type': 'group', 'children': [{'type': 'badge', 'label': 'ok'}]}]})

    inner = viz.terminal.children[0].terminal
    assert inner.children[0].renderable_type == 'badge'
