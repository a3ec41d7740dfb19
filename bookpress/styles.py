"""Stylesheets: inline CSS for the preview page, `styles/epub.css` for the package."""

PREVIEW_CSS = """
body {
    font-family: Georgia, 'Times New Roman', serif;
    line-height: 1.6;
    max-width: 800px;
    margin: 0 auto;
    padding: 20px;
    background-color: #f8f9fa;
}
.book-container {
    background: white;
    padding: 40px;
    border-radius: 8px;
    box-shadow: 0 2px 10px rgba(0,0,0,0.1);
    min-height: 100vh;
}
h1 {
    color: #2c3e50;
    border-bottom: 3px solid #3498db;
    padding-bottom: 10px;
    margin-bottom: 30px;
    font-size: 2.2em;
}
h2 {
    color: #34495e;
    border-left: 4px solid #3498db;
    padding-left: 15px;
    margin-top: 40px;
    margin-bottom: 20px;
    font-size: 1.8em;
}
h3 {
    color: #2c3e50;
    margin-top: 30px;
    margin-bottom: 15px;
    font-size: 1.4em;
    border-bottom: 1px solid #ecf0f1;
    padding-bottom: 5px;
}
h4, h5, h6 {
    color: #34495e;
    margin-top: 20px;
    margin-bottom: 10px;
    font-weight: 600;
}
p {
    margin-bottom: 15px;
    text-align: justify;
}
ul, ol {
    margin-bottom: 20px;
}
li {
    margin-bottom: 8px;
}
blockquote {
    border-left: 4px solid #3498db;
    padding-left: 1em;
    margin-left: 0;
    color: #7f8c8d;
    font-style: italic;
}
hr {
    border: none;
    border-top: 1px solid #dee2e6;
    margin: 30px 0;
}
.chapter + .chapter {
    margin-top: 60px;
}
.toc-container {
    background: linear-gradient(135deg, #f8f9fa 0%, #e9ecef 100%);
    border: 2px solid #dee2e6;
    border-radius: 10px;
    padding: 25px;
    margin: 25px 0;
}
.toc-list {
    list-style: none;
    margin: 0;
    padding: 0;
}
.toc-item {
    display: flex;
    align-items: center;
    margin-bottom: 15px;
    padding: 12px 15px;
    background: white;
    border-radius: 8px;
    box-shadow: 0 2px 4px rgba(0,0,0,0.05);
}
.toc-number {
    font-weight: bold;
    color: #3498db;
    margin-right: 15px;
    min-width: 30px;
}
.toc-title {
    color: #2c3e50;
    font-weight: 500;
}
.image-container {
    margin: 25px 0;
    text-align: center;
}
.book-image {
    max-width: 100%;
    height: auto;
    border-radius: 8px;
    border: 1px solid #e9ecef;
}
.image-caption,
.image-description {
    margin-top: 15px;
    font-size: 0.95em;
    color: #495057;
    font-style: italic;
    text-align: center;
}
.image-description {
    background: #f8f9fa;
    padding: 10px;
    border-radius: 5px;
    border-left: 3px solid #3498db;
}
.image-placeholder {
    background: linear-gradient(135deg, #f8f9fa 0%, #e9ecef 100%);
    border: 2px dashed #bdc3c7;
    padding: 30px;
    text-align: center;
    margin: 25px 0;
    border-radius: 8px;
    color: #7f8c8d;
}
.placeholder-icon {
    font-size: 3em;
    margin-bottom: 15px;
}
.placeholder-text {
    font-size: 1.1em;
    font-weight: 500;
    margin-bottom: 8px;
}
.placeholder-path {
    font-size: 0.9em;
    color: #95a5a6;
    font-family: monospace;
}
pre {
    background: #f4f4f4;
    padding: 15px;
    border-radius: 5px;
    overflow-x: auto;
    margin: 20px 0;
}
code {
    font-family: 'Courier New', monospace;
}
.preview-banner {
    background: #e8f4fd;
    border: 1px solid #3498db;
    padding: 20px;
    border-radius: 5px;
    margin-bottom: 30px;
}
.preview-banner h3 {
    color: #2980b9;
    margin-top: 0;
}
@media (max-width: 768px) {
    body {
        padding: 10px;
    }
    .book-container {
        padding: 20px;
    }
    .toc-item {
        flex-direction: column;
        align-items: flex-start;
    }
}
"""

EPUB_CSS = """body {
    font-family: Georgia, "Times New Roman", serif;
    line-height: 1.6;
    margin: 2em;
    color: #333;
    text-align: justify;
}
h1 {
    color: #2c3e50;
    border-bottom: 2px solid #3498db;
    padding-bottom: 0.5em;
    margin-top: 2em;
    margin-bottom: 1em;
    font-size: 1.8em;
}
h2 {
    color: #34495e;
    margin-top: 2em;
    margin-bottom: 1em;
    font-size: 1.5em;
}
h3 {
    color: #7f8c8d;
    margin-top: 1.5em;
    margin-bottom: 0.8em;
    font-size: 1.3em;
}
h4, h5, h6 {
    color: #95a5a6;
    margin-top: 1.2em;
    margin-bottom: 0.6em;
    font-size: 1.1em;
}
p {
    margin-bottom: 1em;
    text-indent: 1em;
}
ul, ol {
    margin-left: 2em;
    margin-bottom: 1em;
}
li {
    margin-bottom: 0.5em;
}
code {
    background-color: #f8f9fa;
    padding: 0.2em 0.4em;
    font-family: "Courier New", monospace;
    font-size: 0.9em;
}
pre {
    background-color: #f8f9fa;
    padding: 1em;
    margin: 1em 0;
    white-space: pre-wrap;
}
blockquote {
    border-left: 4px solid #3498db;
    padding-left: 1em;
    margin-left: 0;
    color: #7f8c8d;
    font-style: italic;
}
img {
    max-width: 100%;
    height: auto;
    display: block;
    margin: 1em auto;
}
.image-container {
    margin: 1em 0;
    text-align: center;
}
.image-caption,
.image-description {
    text-indent: 0;
    font-size: 0.9em;
    font-style: italic;
    text-align: center;
}
.image-placeholder {
    border: 1px dashed #bdc3c7;
    padding: 1em;
    margin: 1em 0;
    text-align: center;
    color: #7f8c8d;
}
.placeholder-path {
    font-family: monospace;
    font-size: 0.8em;
}
.toc-list {
    list-style: none;
    margin-left: 0;
}
.toc-number {
    font-weight: bold;
    color: #3498db;
    margin-right: 0.5em;
}
"""
