"""HTML/three.js exporter for globe scenes."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from neighborhood_globe.animation import BLINK_RATE
from neighborhood_globe.geo import GLOBE_RADIUS, OUTLINE_RADIUS
from neighborhood_globe.models import GlobeScene

EARTH_TEXTURE_URL = "https://unpkg.com/three-globe/example/img/earth-blue-marble.jpg"
PIXEL_GRANULARITY = 6


def _build_marker_data(scene: GlobeScene) -> list[dict[str, Any]]:
    """Compact per-marker records for JS embedding."""
    return [
        {
            "id": m.person_id,
            "label": m.label,
            "href": m.href,
            "airport": m.airport_code,
            "p": [round(c, 6) for c in m.position],
            "color": m.color.value,
            "size": m.base_size,
        }
        for m in scene.markers
    ]


# HTML template with placeholders that won't conflict with CSS/JS braces
_HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Globe - Adventure Time</title>
    <meta name="description" content="Globe view of adventures">
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        html, body { width: 100vw; height: 100vh; overflow: hidden; background: #fff; }
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; }
        #globe { position: fixed; inset: 0; }
        #globe canvas { width: 100vw !important; height: 100vh !important; image-rendering: pixelated; }
        .breadcrumbs { position: absolute; top: 8px; left: 8px; z-index: 10; font-size: 14px; }
        .breadcrumbs a { color: #000; }
        .tooltip {
            position: absolute; display: none; z-index: 20; padding: 2px 6px;
            background: #000; color: #fff; font-size: 12px; pointer-events: none;
        }
        .footer { position: absolute; bottom: 8px; right: 8px; font-size: 11px; color: #666; }
    </style>
    <script src="https://cdnjs.cloudflare.com/ajax/libs/three.js/r134/three.min.js"></script>
    <script src="https://cdn.jsdelivr.net/npm/three@0.134.0/examples/js/controls/OrbitControls.js"></script>
</head>
<body>
    <div class="breadcrumbs">
        <a href="/">Adventure Time</a> / <a href="/neighborhood">Neighborhood</a> / Globe
    </div>
    <div id="globe"></div>
    <div class="tooltip" id="tooltip"></div>
    <div class="footer">__MARKER_COUNT__ neighbors &middot; Generated: __GENERATED_TIME__</div>
    <script>
        var markers = __MARKER_DATA__;
        var GLOBE_RADIUS = __GLOBE_RADIUS__;
        var OUTLINE_RADIUS = __OUTLINE_RADIUS__;
        var BLINK_RATE = __BLINK_RATE__;
        var GRANULARITY = __GRANULARITY__;

        var container = document.getElementById('globe');
        var tooltip = document.getElementById('tooltip');
        var scene = new THREE.Scene();
        var camera = new THREE.PerspectiveCamera(75, window.innerWidth / window.innerHeight, 0.1, 100);
        camera.position.set(0, 0, 2.5);

        var renderer = new THREE.WebGLRenderer({ antialias: false });
        renderer.setClearColor(0xffffff);
        function resize() {
            camera.aspect = window.innerWidth / window.innerHeight;
            camera.updateProjectionMatrix();
            // render small and let CSS upscale for the pixelated look
            renderer.setSize(
                Math.ceil(window.innerWidth / GRANULARITY),
                Math.ceil(window.innerHeight / GRANULARITY),
                false
            );
        }
        resize();
        container.appendChild(renderer.domElement);
        window.addEventListener('resize', resize);

        scene.add(new THREE.AmbientLight(0xffffff, 0.5));
        var light1 = new THREE.PointLight(0xffffff, 1);
        light1.position.set(10, 10, 10);
        scene.add(light1);
        var light2 = new THREE.PointLight(0xffffff, 0.5);
        light2.position.set(-10, -10, -10);
        scene.add(light2);

        // Tri-color shader: black, white, and red
        var texture = new THREE.TextureLoader().load('__EARTH_TEXTURE__');
        var globeMaterial = new THREE.ShaderMaterial({
            uniforms: { uTexture: { value: texture } },
            vertexShader: [
                'varying vec2 vUv;',
                'void main() {',
                '  vUv = uv;',
                '  gl_Position = projectionMatrix * modelViewMatrix * vec4(position, 1.0);',
                '}'
            ].join('\\n'),
            fragmentShader: [
                'uniform sampler2D uTexture;',
                'varying vec2 vUv;',
                'void main() {',
                '  vec4 color = texture2D(uTexture, vUv);',
                '  if (color.r > 0.7 && color.g < 0.3 && color.b < 0.3) {',
                '    gl_FragColor = vec4(1.0, 0.0, 0.0, 1.0);',
                '    return;',
                '  }',
                '  float luminance = dot(color.rgb, vec3(0.299, 0.587, 0.114));',
                '  gl_FragColor = vec4(vec3(step(0.5, luminance)), 1.0);',
                '}'
            ].join('\\n')
        });
        scene.add(new THREE.Mesh(new THREE.SphereGeometry(GLOBE_RADIUS, 64, 64), globeMaterial));
        scene.add(new THREE.Mesh(
            new THREE.SphereGeometry(OUTLINE_RADIUS, 64, 64),
            new THREE.MeshBasicMaterial({ color: 0x000000, side: THREE.BackSide })
        ));

        var dotGeometry = new THREE.SphereGeometry(1, 16, 16);
        var dots = markers.map(function(m) {
            var mesh = new THREE.Mesh(dotGeometry, new THREE.MeshBasicMaterial({ color: m.color }));
            mesh.position.set(m.p[0], m.p[1], m.p[2]);
            mesh.userData = m;
            scene.add(mesh);
            return mesh;
        });

        var controls = new THREE.OrbitControls(camera, renderer.domElement);
        controls.enableZoom = true;
        controls.enablePan = false;
        controls.minDistance = 1.5;
        controls.maxDistance = 5;

        var raycaster = new THREE.Raycaster();
        var pointer = new THREE.Vector2();
        function pick(event) {
            var rect = renderer.domElement.getBoundingClientRect();
            pointer.x = ((event.clientX - rect.left) / rect.width) * 2 - 1;
            pointer.y = -((event.clientY - rect.top) / rect.height) * 2 + 1;
            raycaster.setFromCamera(pointer, camera);
            var hits = raycaster.intersectObjects(dots);
            return hits.length ? hits[0].object : null;
        }
        renderer.domElement.addEventListener('pointermove', function(event) {
            var hit = pick(event);
            document.body.style.cursor = hit ? 'pointer' : 'default';
            if (hit) {
                tooltip.textContent = hit.userData.label + ' (' + hit.userData.airport + ')';
                tooltip.style.left = (event.clientX + 12) + 'px';
                tooltip.style.top = (event.clientY + 12) + 'px';
                tooltip.style.display = 'block';
            } else {
                tooltip.style.display = 'none';
            }
        });
        renderer.domElement.addEventListener('click', function(event) {
            var hit = pick(event);
            if (hit) window.location.href = hit.userData.href;
        });

        var clock = new THREE.Clock();
        function frame() {
            var scale = Math.abs(Math.sin(clock.getElapsedTime() * BLINK_RATE));
            for (var i = 0; i < dots.length; i++) {
                var s = scale * dots[i].userData.size;
                dots[i].scale.set(s, s, s);
            }
            controls.update();
            renderer.render(scene, camera);
            requestAnimationFrame(frame);
        }
        requestAnimationFrame(frame);
    </script>
</body>
</html>"""


def render_html(scene: GlobeScene) -> str:
    """Render a standalone three.js globe page for *scene*."""
    generated_time = datetime.now(tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    marker_json = json.dumps(_build_marker_data(scene)).replace("</", "<\\/")

    return (
        _HTML_TEMPLATE.replace("__MARKER_COUNT__", str(len(scene.markers)))
        .replace("__GLOBE_RADIUS__", repr(GLOBE_RADIUS))
        .replace("__OUTLINE_RADIUS__", repr(OUTLINE_RADIUS))
        .replace("__BLINK_RATE__", repr(BLINK_RATE))
        .replace("__GRANULARITY__", str(PIXEL_GRANULARITY))
        .replace("__EARTH_TEXTURE__", EARTH_TEXTURE_URL)
        .replace("__GENERATED_TIME__", generated_time)
        # user-supplied names go in last so they are never re-substituted
        .replace("__MARKER_DATA__", marker_json)
    )


def export_html(
    scene: GlobeScene,
    output_path: Path,
) -> Path:
    """Export the scene as a standalone HTML file with a three.js globe."""
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(render_html(scene))
    return output_path
