from django.shortcuts import render


def demo_page(request):
    """Bare public page showing whatever the enqueue pass queued."""
    return render(request, "enqueue/demo.html")
