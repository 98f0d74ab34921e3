import sys
import logging

from textmesh import Anchor, FontAssets, Justify, TextMesh, TextMeshStyle, TextMeshSystem
from textmesh.export import write_stl

log = logging.getLogger(__name__)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) < 2:
        print(f"Usage: {sys.argv[0]} FONT_FILE [TEXT]")
        sys.exit(1)
    font_path = sys.argv[1]
    text = sys.argv[2].replace("\\n", "\n") if len(sys.argv) > 2 else "Hello\nTextMesh"

    assets = FontAssets()
    font_id = assets.load(font_path)
    system = TextMeshSystem(assets)
    log.info(f"Using font: '{font_path}'")

    meshes = {}
    for justify in Justify:
        meshes[f"flat_{justify.value}"] = TextMesh(
            text, font=font_id, style=TextMeshStyle(depth=0.0, justify=justify)
        )
    meshes["extruded"] = TextMesh(
        text, font=font_id, style=TextMeshStyle(depth=0.2, anchor=Anchor.BOTTOM_LEFT)
    )

    results = system.update(meshes)
    for name, result in results.items():
        filename = f"{name}.stl"
        print(
            f"{name}: {len(result.vertices)} vertices, {len(result.indices) // 3} triangles, "
            f"size {result.bounds.size[:2]}"
        )
        write_stl(result, filename)
        print(f"Exported STL: {filename}")

    # Nothing changed, nothing is recomputed.
    assert system.update(meshes) == {}
