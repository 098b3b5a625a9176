"""
Pulls the final SMILES out of Ether0's reasoning text and wraps it in a
standalone HTML snippet that draws it with SmilesDrawer in the client.
"""
import html
import json
import re
import time


# Ether0 bolds its final answer: **CC(=O)O**
COMPLETION_PATTERN = re.compile(r"\*\*([^*]+)\*\*")

NO_RESULT = "No SMILES found"


def has_completion(text: str) -> bool:
    return COMPLETION_PATTERN.search(text) is not None


def extract_structure(text: str) -> str | None:
    """First bolded run, whitespace-trimmed. None when there is no match."""
    match = COMPLETION_PATTERN.search(text)
    if not match:
        return None
    return match.group(1).strip()


def is_reaction(smiles: str) -> bool:
    return ">" in smiles


def render_structure_html(
    smiles: str,
    drawer_url: str,
    element_id: str | None = None,
    escape: bool = False,
) -> str:
    """
    Build the snippet the frontend drops into the chat.

    Reactions (A>>B) get an <svg> target, molecules an <img>. With escape=False
    the SMILES is pasted into the markup and script exactly as extracted.
    """
    if element_id is None:
        element_id = f"smiles-{int(time.time() * 1000)}"

    if escape:
        # \u-escape markup characters so the value can't close the <script>
        js_value = (
            json.dumps(smiles)
            .replace("<", "\\u003c")
            .replace(">", "\\u003e")
            .replace("&", "\\u0026")
        )
        element_id = html.escape(element_id, quote=True)
    else:
        js_value = f'"{smiles}"'

    if is_reaction(smiles):
        target = '<svg data-smiles="{0}" width="100%" height="400"></svg>'
    else:
        target = "<img data-smiles=\"{0}\" data-smiles-options='{{\"width\":600,\"height\":400}}' />"
    target = target.format(html.escape(smiles, quote=True) if escape else smiles)

    return f"""
<div style="background:white;padding:20px;border-radius:10px;margin-top:10px;">
  <script src="{drawer_url}"></script>
  <div id="{element_id}" style="height:400px;display:flex;justify-content:center;align-items:center;">
    <noscript>{target}</noscript>
  </div>
  <script>
    (function(){{
      const smiles = {js_value};
      const container = document.getElementById("{element_id}");
      try {{
        if (smiles.includes(">")) {{
          const svg = document.createElementNS("http://www.w3.org/2000/svg", "svg");
          svg.setAttribute("data-smiles", smiles);
          svg.setAttribute("width", "100%");
          svg.setAttribute("height", "400");
          container.appendChild(svg);
        }} else {{
          const img = document.createElement("img");
          img.setAttribute("data-smiles", smiles);
          img.setAttribute("data-smiles-options", '{{"width":600,"height":400}}');
          container.appendChild(img);
        }}
        SmiDrawer.apply();
      }} catch (err) {{
        container.innerHTML = "<p>Unable to render structure</p>";
      }}
    }})();
  </script>
</div>
"""
